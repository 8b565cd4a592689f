import base64
import binascii
import functools
import hmac
from typing import Optional, Tuple

from quart import request

from ..common.context import get_settings
from ..common.errors import AuthError


def encode_token(username: str, password: str) -> str:
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def decode_token(token: str) -> Tuple[str, str]:
    try:
        raw = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise AuthError("Invalid authentication token") from e
    username, _, password = raw.partition(":")
    return username, password


def credentials_match(username: Optional[str], password: Optional[str]) -> bool:
    settings = get_settings()
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return False
    if not isinstance(username, str) or not isinstance(password, str):
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return user_ok and pass_ok


def authenticate_admin(fn):
    """Require ``Authorization: Bearer <base64(username:password)>``."""

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            raise AuthError("No authentication token provided")
        username, password = decode_token(header[len("Bearer "):].strip())
        if not credentials_match(username, password):
            raise AuthError("Invalid credentials")
        return await fn(*args, **kwargs)

    return wrapper
