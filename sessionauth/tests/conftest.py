from __future__ import annotations

import os

# Settings are cached on first load; pin them before any application import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-length-for-hmac")
os.environ.setdefault("APP_ENV", "test")
