"""
Tests for authentication app.

This package contains test modules for:
- test_managers.py: UserManager creation rules
- factories.py: UserFactory shared with the chat and notification tests
"""
