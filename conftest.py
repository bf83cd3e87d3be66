"""Global pytest configuration."""

import os

# Set EAC_DATABASE_URL for tests before any imports
os.environ.setdefault("EAC_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
