"""
Authentication application.

Holds the custom user model. Credentials and tokens are issued by the
external identity provider; this service only verifies JWTs (see
SIMPLE_JWT in settings) and resolves them to a User row.

Usage:
    from authentication.models import User
"""
