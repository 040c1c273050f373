# tests/test_codec.py

"""Tests for Firestore typed-value encoding and decoding."""

import unittest
from datetime import datetime, timezone

from storefront.store.codec import (
    decode_document,
    decode_fields,
    decode_value,
    document_id,
    encode_fields,
    encode_value,
)


class TestEncodeValue(unittest.TestCase):
    """encode_value wraps Python values in typed-value objects."""

    def test_integer_travels_as_string(self) -> None:
        """Integers are sent as decimal strings."""
        self.assertEqual(encode_value(7), {"integerValue": "7"})

    def test_bool_is_not_an_integer(self) -> None:
        """bool is checked before int."""
        self.assertEqual(encode_value(True), {"booleanValue": True})

    def test_float(self) -> None:
        self.assertEqual(encode_value(9.5), {"doubleValue": 9.5})

    def test_none(self) -> None:
        self.assertEqual(encode_value(None), {"nullValue": None})

    def test_naive_datetime_is_utc(self) -> None:
        """Naive datetimes are treated as UTC and end in Z."""
        stamp = encode_value(datetime(2024, 1, 2, 3, 4, 5))
        self.assertEqual(
            stamp, {"timestampValue": "2024-01-02T03:04:05Z"}
        )

    def test_aware_datetime(self) -> None:
        stamp = encode_value(
            datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        )
        self.assertEqual(
            stamp["timestampValue"], "2024-01-02T03:04:05Z"
        )

    def test_nested_map_and_array(self) -> None:
        """Dicts become mapValue and lists become arrayValue."""
        encoded = encode_fields(
            {"rating": {"rate": 4.5, "count": 3}, "tags": ["a", "b"]}
        )
        fields = encoded["fields"]
        self.assertEqual(
            fields["rating"]["mapValue"]["fields"]["count"],
            {"integerValue": "3"},
        )
        self.assertEqual(
            fields["tags"]["arrayValue"]["values"],
            [{"stringValue": "a"}, {"stringValue": "b"}],
        )

    def test_unsupported_type_raises(self) -> None:
        with self.assertRaises(TypeError):
            encode_value(object())


class TestDecodeValue(unittest.TestCase):
    """decode_value unwraps typed-value objects."""

    def test_integer_string_becomes_int(self) -> None:
        self.assertEqual(decode_value({"integerValue": "42"}), 42)

    def test_timestamp_kept_as_string(self) -> None:
        value = decode_value({"timestampValue": "2024-05-01T00:00:00Z"})
        self.assertEqual(value, "2024-05-01T00:00:00Z")

    def test_reference_is_resource_name(self) -> None:
        name = "projects/p/databases/(default)/documents/products/001"
        self.assertEqual(decode_value({"referenceValue": name}), name)

    def test_empty_array(self) -> None:
        """An empty arrayValue has no 'values' key."""
        self.assertEqual(decode_value({"arrayValue": {}}), [])

    def test_empty_map(self) -> None:
        self.assertEqual(decode_value({"mapValue": {}}), {})

    def test_unknown_value_raises(self) -> None:
        with self.assertRaises(ValueError):
            decode_value({"mysteryValue": 1})

    def test_fields_round_trip(self) -> None:
        """Decoding encoded fields gives back the original mapping."""
        data = {
            "title": "Lamp",
            "price": 19.99,
            "stock": 0,
            "tags": ["home"],
            "rating": {"rate": 4.0, "count": 2},
        }
        self.assertEqual(decode_fields(encode_fields(data)), data)


class TestDocumentHelpers(unittest.TestCase):
    """document_id and decode_document."""

    def test_document_id_is_last_segment(self) -> None:
        name = "projects/p/databases/(default)/documents/products/007"
        self.assertEqual(document_id(name), "007")

    def test_decode_document(self) -> None:
        doc = {
            "name": "projects/p/databases/(default)/documents/categories/x",
            "fields": {"name": {"stringValue": "beauty"}},
        }
        self.assertEqual(decode_document(doc), ("x", {"name": "beauty"}))

    def test_decode_document_without_fields(self) -> None:
        """A document with no fields decodes to an empty mapping."""
        doc = {"name": "projects/p/databases/(default)/documents/a/b"}
        self.assertEqual(decode_document(doc), ("b", {}))


if __name__ == "__main__":
    unittest.main()
