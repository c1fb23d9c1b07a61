############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# __init__.py: Security utilities package exports
#
############################################################

"""Security utilities for Xarwiz CMS."""

from backend.app.security.password_hash import hash_password, verify_password
from backend.app.security.tokens import TokenClaims, decode_token, issue_token

__all__ = [
    "hash_password",
    "verify_password",
    "TokenClaims",
    "decode_token",
    "issue_token",
]
