"""
Test package
Settings require these variables at import time; tests never reach the real services.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("WORKOS_API_KEY", "sk_test_lokalfinds")
os.environ.setdefault("WORKOS_CLIENT_ID", "client_test_lokalfinds")
