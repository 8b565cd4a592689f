from typing import Any, Dict, List

from quart import Blueprint, jsonify

from ..common.errors import ValidationError, translate_errors
from ..common.http import json_body
from .service import create_link, get_link_details, update_payment_status

bp = Blueprint("links", __name__, url_prefix="/api")


def _parse_lines(products: Any) -> List[Dict[str, Any]]:
    if not isinstance(products, list) or not products:
        raise ValidationError("At least one product is required")
    lines = []
    for item in products:
        if not isinstance(item, dict) or not item.get("productId"):
            raise ValidationError("Each product needs a productId")
        quantity = item.get("quantity")
        if isinstance(quantity, str) and quantity.strip().isdecimal():
            quantity = int(quantity)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Each product needs a positive integer quantity")
        lines.append({"productId": str(item["productId"]), "quantity": quantity})
    return lines


@bp.post("/generate-link")
@translate_errors("Error generating link")
async def generate_link():
    data = await json_body()
    lines = _parse_lines(data.get("products"))
    link_id = await create_link(lines)
    return jsonify({"success": True, "linkId": link_id, "message": "Link generated successfully"})


@bp.get("/order-link/<link_id>")
@translate_errors("Error fetching order details")
async def order_link(link_id: str):
    details = await get_link_details(link_id)
    return jsonify({"success": True, "data": details})


@bp.put("/update-payment-status")
@translate_errors("Error updating payment status")
async def payment_status():
    data = await json_body()
    link_id = data.get("linkId")
    status = data.get("paymentStatus")
    if not link_id or not status:
        raise ValidationError("linkId and paymentStatus are required")
    await update_payment_status(str(link_id), str(status))
    return jsonify({"success": True, "message": "Payment status updated successfully"})
