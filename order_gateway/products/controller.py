from quart import Blueprint, jsonify

from ..admin.auth import authenticate_admin
from ..common.errors import NotFoundError, translate_errors
from .service import get_product, get_products

bp = Blueprint("products", __name__, url_prefix="/api")


@bp.get("/products")
@translate_errors("Error fetching products")
@authenticate_admin
async def products_list():
    items = await get_products()
    return jsonify({"success": True, "data": [p.summary() for p in items]})


@bp.get("/product/<product_id>")
@translate_errors("Error fetching product data")
async def product_detail(product_id: str):
    product = await get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return jsonify({"success": True, "data": product.to_json()})
