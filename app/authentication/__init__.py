"""
Authentication application.

Users sign in with Firebase Authentication in the browser. This app verifies
the Firebase ID token, maps it to a local User, and issues API tokens.

Key components:
    - User model: Email-based user linked to a Firebase uid
    - Profile model: Display name, avatar and status shown to other users
    - FirebaseAuthentication: DRF authentication class for Firebase ID tokens
    - AuthService: User sync and profile operations

Usage:
    from authentication.models import User, Profile
    from authentication.services import AuthService
"""
