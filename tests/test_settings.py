# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from storefront.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants."""

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_page_size_within_max(self) -> None:
        self.assertGreaterEqual(Settings.PAGE_SIZE, 1)
        self.assertLessEqual(Settings.PAGE_SIZE, Settings.MAX_PAGE_SIZE)

    def test_default_sort_is_sortable(self) -> None:
        self.assertIn(Settings.DEFAULT_SORT_FIELD, Settings.SORTABLE_FIELDS)
        self.assertIn(Settings.DEFAULT_ORDER, ("asc", "desc"))

    def test_sortable_fields_unique(self) -> None:
        fields = Settings.SORTABLE_FIELDS
        self.assertEqual(len(fields), len(set(fields)))

    def test_rating_bounds(self) -> None:
        """Reviews are rated 1 to 5."""
        self.assertEqual(Settings.MIN_RATING, 1)
        self.assertEqual(Settings.MAX_RATING, 5)

    def test_collections_named(self) -> None:
        for name in (
            Settings.PRODUCTS_COLLECTION,
            Settings.REVIEWS_COLLECTION,
            Settings.CATEGORIES_COLLECTION,
        ):
            with self.subTest(name=name):
                self.assertTrue(name)
                self.assertNotIn("/", name)

    def test_api_port_is_int(self) -> None:
        self.assertIsInstance(Settings.API_PORT, int)

    def test_log_retention_positive(self) -> None:
        self.assertIsInstance(Settings.LOG_KEEP_RUNS, int)
        self.assertGreater(Settings.LOG_KEEP_RUNS, 0)

    def test_console_log_level_is_a_name(self) -> None:
        self.assertIsInstance(Settings.CONSOLE_LOG_LEVEL, str)
        self.assertTrue(Settings.CONSOLE_LOG_LEVEL)

    def test_base_dir_is_path(self) -> None:
        """BASE_DIR must be a Path instance."""
        self.assertIsInstance(Settings.BASE_DIR, Path)


if __name__ == "__main__":
    unittest.main()
