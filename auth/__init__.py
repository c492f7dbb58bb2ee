from auth.dependencies import (
    UserContext,
    get_current_user,
    get_user_context,
    require_roles,
    require_capability,
    require_scope,
)
from auth.service import authenticate_user, get_user_roles, set_user_roles
from auth.token import issue_token, extract_claims, decode_token
from auth.passwords import hash_password, verify_password, generate_temporary_password

__all__ = [
    "UserContext",
    "get_current_user",
    "get_user_context",
    "require_roles",
    "require_capability",
    "require_scope",
    "authenticate_user",
    "get_user_roles",
    "set_user_roles",
    "issue_token",
    "extract_claims",
    "decode_token",
    "hash_password",
    "verify_password",
    "generate_temporary_password",
]
