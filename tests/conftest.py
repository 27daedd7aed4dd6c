"""
Test configuration

The service creates its tables at import time, so the database URI must be
chosen before anything imports `service`. Tests default to an in-memory
SQLite database; export DATABASE_URI to run them against PostgreSQL.
"""

import os

os.environ.setdefault("DATABASE_URI", "sqlite:///:memory:")
