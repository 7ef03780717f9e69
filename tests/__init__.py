# Album Tree Test Suite
"""
Test suite for the album hierarchy manager.

Unit tests cover the hierarchy components against a real SQLite file;
integration tests drive the same behavior through the HTTP API.
"""
