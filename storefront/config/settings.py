# storefront/config/settings.py

"""Central configuration for the storefront."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront."""

    # --- Hosted backend ---
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "")
    FIREBASE_API_KEY: str = os.getenv("FIREBASE_API_KEY", "")
    FIRESTORE_DATABASE: str = os.getenv("FIRESTORE_DATABASE", "(default)")
    # host:port of local emulators, empty for the hosted services
    FIRESTORE_EMULATOR_HOST: str = os.getenv("FIRESTORE_EMULATOR_HOST", "")
    FIREBASE_AUTH_EMULATOR_HOST: str = os.getenv(
        "FIREBASE_AUTH_EMULATOR_HOST", ""
    )
    FIRESTORE_BASE_URL: str = "https://firestore.googleapis.com/v1"
    IDENTITY_BASE_URL: str = "https://identitytoolkit.googleapis.com/v1"

    # --- HTTP ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out

    # --- Catalog ---
    PAGE_SIZE: int = 20                 # Products per page
    MAX_PAGE_SIZE: int = 100
    DEFAULT_SORT_FIELD: str = "id"
    DEFAULT_ORDER: str = "asc"
    SORTABLE_FIELDS: list[str] = [
        "id",
        "price",
        "title",
        "rating.rate",
        "stock",
    ]
    PRODUCT_ID_WIDTH: int = 3           # "7" is stored as "007"

    # --- Collections ---
    PRODUCTS_COLLECTION: str = "products"
    REVIEWS_COLLECTION: str = "reviews"
    CATEGORIES_COLLECTION: str = "categories"
    CATEGORIES_DOCUMENT: str = "allCategories"

    # --- Reviews ---
    MIN_RATING: int = 1
    MAX_RATING: int = 5
    ANONYMOUS_REVIEWER: str = "Anonymous"

    # --- API server ---
    API_HOST: str = os.getenv("STOREFRONT_API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("STOREFRONT_API_PORT", "5000"))

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("STOREFRONT_LOG_LEVEL", "WARNING")
    LOG_KEEP_RUNS: int = 20             # Older run_*.log files are pruned

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
