"""Root conftest - shared test configuration."""

import os

# Tests never sleep between phases and never hit a real database file
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PHASE_DELAY_MS", "0")
os.environ.setdefault("CHAT_LATENCY_MS", "0")
os.environ.setdefault("LOG_FORMAT", "text")
