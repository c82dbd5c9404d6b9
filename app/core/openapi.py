"""
OpenAPI schema customizations for drf-spectacular.

Tag naming follows the pattern: [App Name] - [Group Name]
Examples:
- Auth - Firebase (token exchange)
- Auth - Profile (profile CRUD)
- Auth - Users (user directory)
- Chat - Channels
- Chat - Channel Members
- Chat - Messages
"""

# Summaries for SimpleJWT endpoints, which carry no docstrings of their own.
# Maps operation_id to (summary, description)
TOKEN_SUMMARIES = {
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
    "auth_token_verify_create": (
        "Verify token",
        "Verify that an access token is valid.",
    ),
}

TAG_DESCRIPTIONS = [
    {
        "name": "Auth",
        "description": "JWT token management.",
    },
    {
        "name": "Auth - Firebase",
        "description": "Exchange a Firebase ID token for API access and refresh tokens.",
    },
    {
        "name": "Auth - Profile",
        "description": "Current user's profile: display name, avatar and status.",
    },
    {
        "name": "Auth - Users",
        "description": "Directory of users that can be added to channels.",
    },
    {
        "name": "Chat - Channels",
        "description": "Chat rooms the current user belongs to.",
    },
    {
        "name": "Chat - Channel Members",
        "description": "Channel membership, common channels and exact-member lookups.",
    },
    {
        "name": "Chat - Messages",
        "description": "Messages within channels and the per-channel last-messages inbox.",
    },
]


def group_auth_endpoints(result, generator, request, public):
    """
    Postprocessing hook to group API endpoints by function.

    Chat views set their tags with @extend_schema; this hook covers the
    auth endpoints that come from third-party views and adds summaries
    and tag descriptions.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in TOKEN_SUMMARIES:
                summary, description = TOKEN_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_token_"):
                operation["tags"] = ["Auth"]

    result["tags"] = TAG_DESCRIPTIONS

    return result
