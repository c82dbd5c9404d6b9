"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User, Profile and UserManager tests
- test_services.py: AuthService tests
- test_views.py: API endpoint tests
- test_firebase.py: Firebase token verification tests
- test_signals.py: Profile creation signal tests

Usage:
    pytest authentication/tests/
    pytest authentication/tests/test_models.py
"""
