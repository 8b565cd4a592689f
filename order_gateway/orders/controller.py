from quart import Blueprint, jsonify

from ..common.errors import NotFoundError, ValidationError, translate_errors
from ..common.http import json_body
from .service import find_order, save_order

bp = Blueprint("orders", __name__, url_prefix="/api")

_CELL_TYPES = (str, int, float, bool, type(None))


def _is_row(row) -> bool:
    return isinstance(row, (list, tuple)) and all(isinstance(c, _CELL_TYPES) for c in row)


@bp.post("/saveToSheet")
@translate_errors("Error saving data")
async def save_to_sheet():
    data = await json_body()
    products = data.get("products")
    if products is not None and not (
        isinstance(products, list) and all(isinstance(p, dict) for p in products)
    ):
        raise ValidationError("products must be a list of objects")
    details = data.get("customizationDetails")
    if details is not None and not (
        isinstance(details, dict)
        and all(isinstance(rows, list) and all(_is_row(r) for r in rows) for rows in details.values())
    ):
        raise ValidationError("customizationDetails must map each key to a list of rows of cell values")
    await save_order(data)
    return jsonify({"success": True, "message": "Data saved successfully"})


@bp.get("/order/<order_id>")
@translate_errors("Error fetching order details")
async def order_detail(order_id: str):
    order = await find_order(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return jsonify({"success": True, "data": order})
