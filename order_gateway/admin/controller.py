import logging

from quart import Blueprint, jsonify

from ..common.errors import AuthError
from ..common.http import json_body
from .auth import credentials_match, encode_token

_logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@bp.post("/login")
async def login():
    data = await json_body()
    username = data.get("username")
    password = data.get("password")
    if not credentials_match(username, password):
        _logger.warning("Admin login rejected | username=%s", username)
        raise AuthError("Invalid credentials")
    return jsonify({"success": True, "token": encode_token(username, password)})
