import logging
from typing import Dict, List, Optional

from ..common.context import get_settings, get_sheets
from .model import DATA_RANGE, Product

_logger = logging.getLogger(__name__)


async def get_products() -> List[Product]:
    sheets = get_sheets()
    rows = await sheets.get_values(get_settings().PRODUCTS_SHEET_ID, DATA_RANGE)
    _logger.info("Sheets get products | rows=%s", len(rows))
    return [Product.from_row(row) for row in rows]


async def get_product(product_id: str) -> Optional[Product]:
    for product in await get_products():
        if product.id == product_id:
            return product
    _logger.info("Product not found | product_id=%s", product_id)
    return None


async def get_products_by_id() -> Dict[str, Product]:
    # later rows win on duplicate ids
    return {p.id: p for p in await get_products() if p.id is not None}
