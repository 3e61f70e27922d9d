"""
Test environment. Settings are read once at import of app.core.config, so the
variables below must be set before any app module is imported.

DATABASE_URL points at a single shared in-memory SQLite connection (StaticPool,
see app.core.database); each test resets the schema through tests.support.
"""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-jwt-secret-0123456789abcdef0123456789abcdef"
os.environ["JWT_EXPIRE_MINUTES"] = "60"
os.environ["ADMIN_SECRET_KEY"] = "test-admin-secret"
os.environ["ORDER_STATUS_ENFORCE_TRANSITIONS"] = "false"
