"""Root conftest — shared test configuration."""

import os

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SITE_URL", "http://example.test")
# Fast hashing in tests; production default is much higher
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")
os.environ.setdefault("LOG_FORMAT", "text")
