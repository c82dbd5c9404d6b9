"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Channel, ChannelMember, Message model tests
- test_services.py: Channel, membership and message service tests
- test_views.py: REST API endpoint tests
- test_permissions.py: Permission class tests
- test_consumers.py: WebSocket consumer tests
- test_middleware.py: WebSocket token authentication tests
- test_realtime.py: Channel layer broadcast tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
