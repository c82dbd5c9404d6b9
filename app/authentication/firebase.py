"""
Firebase Authentication integration.

The browser signs users in with Firebase and sends the resulting ID token to
the API. This module verifies those tokens with the Firebase Admin SDK and
exposes a DRF authentication class for them.

Header format:
    Authorization: Firebase <id-token>

Bearer tokens are left to SimpleJWT; a client can also trade its Firebase ID
token for a JWT pair once (see views.FirebaseLoginView) and use that.

Configuration (settings):
    FIREBASE_CREDENTIALS_FILE: Service account JSON path (empty = application
        default credentials)
    FIREBASE_PROJECT_ID: Project id used when verifying tokens
    FIREBASE_CHECK_REVOKED: Also check whether the token was revoked

Usage:
    from authentication.firebase import verify_id_token

    claims = verify_id_token(token)
    claims["uid"], claims.get("email")
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import firebase_admin
from django.conf import settings
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions
from rest_framework import authentication, exceptions, status

from core.exceptions import BaseApplicationError, ExternalServiceError

if TYPE_CHECKING:
    from typing import Any

    from rest_framework.request import Request

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


class InvalidFirebaseTokenError(BaseApplicationError):
    """Raised when a Firebase ID token is malformed, expired, or revoked."""

    default_error_code: str = "INVALID_FIREBASE_TOKEN"
    status_code: int = status.HTTP_401_UNAUTHORIZED


def get_firebase_app() -> firebase_admin.App:
    """
    Return the default Firebase app, initializing it on first use.

    Initialization is lazy so that importing this module (and running
    tests that mock verification) never needs credentials.
    """
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        credentials_file = settings.FIREBASE_CREDENTIALS_FILE
        cred = credentials.Certificate(credentials_file) if credentials_file else None

        options = {}
        if settings.FIREBASE_PROJECT_ID:
            options["projectId"] = settings.FIREBASE_PROJECT_ID

        logger.info(
            f"Initializing Firebase app (project={settings.FIREBASE_PROJECT_ID or 'default'})"
        )
        return firebase_admin.initialize_app(cred, options or None)


def verify_id_token(id_token: str) -> dict[str, Any]:
    """
    Verify a Firebase ID token and return its decoded claims.

    Args:
        id_token: Raw ID token issued by Firebase Authentication

    Returns:
        Decoded claims (uid, email, email_verified, name, picture, ...)

    Raises:
        InvalidFirebaseTokenError: Token is malformed, expired, revoked,
            or belongs to a disabled Firebase user
        ExternalServiceError: Google public keys could not be fetched
    """
    if not id_token:
        raise InvalidFirebaseTokenError("Firebase ID token is required")

    try:
        return firebase_auth.verify_id_token(
            id_token,
            app=get_firebase_app(),
            check_revoked=settings.FIREBASE_CHECK_REVOKED,
        )
    except firebase_auth.ExpiredIdTokenError as exc:
        raise InvalidFirebaseTokenError(
            "Firebase ID token has expired", error_code="FIREBASE_TOKEN_EXPIRED"
        ) from exc
    except firebase_auth.RevokedIdTokenError as exc:
        raise InvalidFirebaseTokenError(
            "Firebase ID token has been revoked", error_code="FIREBASE_TOKEN_REVOKED"
        ) from exc
    except firebase_auth.UserDisabledError as exc:
        raise InvalidFirebaseTokenError(
            "Firebase user is disabled", error_code="FIREBASE_USER_DISABLED"
        ) from exc
    except (firebase_auth.InvalidIdTokenError, ValueError) as exc:
        raise InvalidFirebaseTokenError("Invalid Firebase ID token") from exc
    except firebase_auth.CertificateFetchError as exc:
        logger.error(f"Could not fetch Firebase public keys: {exc}")
        raise ExternalServiceError(
            "Authentication service unavailable",
            error_code="FIREBASE_UNAVAILABLE",
        ) from exc
    except firebase_exceptions.FirebaseError as exc:
        logger.error(f"Firebase token verification failed: {exc}")
        raise ExternalServiceError(
            "Authentication service unavailable",
            error_code="FIREBASE_UNAVAILABLE",
        ) from exc


class FirebaseAuthentication(authentication.BaseAuthentication):
    """
    DRF authentication using Firebase ID tokens.

    Returns (user, claims) on success. The local user is created or linked
    on first sight by AuthService.sync_firebase_user().
    """

    keyword = "Firebase"

    def authenticate(self, request: Request):
        auth = authentication.get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) == 1:
            raise exceptions.AuthenticationFailed(
                "Invalid Firebase header. No token provided."
            )
        if len(auth) > 2:
            raise exceptions.AuthenticationFailed(
                "Invalid Firebase header. Token string should not contain spaces."
            )

        try:
            id_token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed(
                "Invalid Firebase header. Token contains invalid characters."
            )

        return self.authenticate_token(id_token)

    def authenticate_token(self, id_token: str):
        from authentication.services import AuthService

        try:
            claims = verify_id_token(id_token)
        except (InvalidFirebaseTokenError, ExternalServiceError) as exc:
            raise exceptions.AuthenticationFailed(exc.message)

        result = AuthService.sync_firebase_user(claims)
        if not result.success:
            raise exceptions.AuthenticationFailed(result.error)

        return result.data, claims

    def authenticate_header(self, request: Request) -> str:
        return f'{self.keyword} realm="api"'
