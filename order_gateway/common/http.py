from typing import Any, Dict

from quart import request


async def json_body() -> Dict[str, Any]:
    """Request JSON as a dict; anything else (no body, bad JSON, a list) is empty."""
    data = await request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}
