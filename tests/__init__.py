"""Test suite for the Tasklane authentication service.

Test structure follows the test pyramid:
- unit/: Domain logic, services and adapters in isolation
- integration/: Repositories and audit adapter against PostgreSQL
- api/: HTTP endpoints end-to-end through the FastAPI app
"""
