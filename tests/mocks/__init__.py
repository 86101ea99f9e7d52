# tests/mocks/__init__.py
TEST_SECRET = "test_secret"
