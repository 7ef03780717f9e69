# Integration Tests
"""
Integration tests verify album tree workflows through the HTTP API.

Principle: Test behavior, not implementation.
"""
