"""Integration tests against a real PostgreSQL database (TEST_DATABASE_URL)."""
