import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from quart import current_app

from ..common.cells import json_float
from ..common.errors import BackendError, NotFoundError
from ..common.locks import get_locks
from ..common.context import get_settings, get_sheets
from ..products.service import get_products_by_id
from .model import (
    APPEND_RANGE,
    HEADER,
    HEADER_RANGE,
    SHEET_NAME,
    TABLE_RANGE,
    OrderLinkLine,
    generate_link_id,
    payment_status_of,
    with_payment_status,
)

_logger = logging.getLogger(__name__)


def _iso_now() -> str:
    # millisecond precision with a Z suffix, e.g. 2024-05-01T10:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def _provision(spreadsheet_id: str) -> None:
    sheets = get_sheets()
    titles = await sheets.get_sheet_titles(spreadsheet_id)
    if SHEET_NAME not in titles:
        _logger.info("Creating sheet | spreadsheet_id=%s title=%s", spreadsheet_id, SHEET_NAME)
        await sheets.create_sheet(spreadsheet_id, SHEET_NAME)
        await sheets.append_values(spreadsheet_id, HEADER_RANGE, [HEADER])


async def ensure_order_links_sheet() -> None:
    """Create the OrderLinks sheet with its header row unless it exists.

    Caller must hold the OrderLinks lock. Success is remembered for the life
    of the app so the check runs at most once per spreadsheet.
    """
    spreadsheet_id = get_settings().ORDER_LINKS_SHEET_ID
    provisioned = current_app.provisioned_sheets
    if spreadsheet_id in provisioned:
        return
    try:
        await _provision(spreadsheet_id)
    except Exception as e:
        _logger.exception("Error checking/creating OrderLinks sheet | err=%s", e)
        raise BackendError("Failed to setup OrderLinks sheet", error=str(e)) from e
    provisioned.add(spreadsheet_id)


async def provision_at_startup() -> None:
    spreadsheet_id = get_settings().ORDER_LINKS_SHEET_ID
    async with get_locks().hold(spreadsheet_id):
        await ensure_order_links_sheet()
    header = await get_sheets().get_values(spreadsheet_id, HEADER_RANGE)
    found = header[0] if header else []
    if found != HEADER:
        _logger.warning("OrderLinks header mismatch | expected=%s found=%s", HEADER, found)


async def create_link(lines: Sequence[Dict[str, Any]]) -> str:
    settings = get_settings()
    link_id = generate_link_id()
    timestamp = _iso_now()
    rows = [
        OrderLinkLine(
            link_id=link_id,
            product_id=line["productId"],
            quantity=line["quantity"],
            timestamp=timestamp,
        ).to_row()
        for line in lines
    ]
    async with get_locks().hold(settings.ORDER_LINKS_SHEET_ID):
        await ensure_order_links_sheet()
        await get_sheets().append_values(settings.ORDER_LINKS_SHEET_ID, APPEND_RANGE, rows)
    _logger.info("Order link created | link_id=%s lines=%s", link_id, len(rows))
    return link_id


async def get_link_lines(link_id: str) -> List[OrderLinkLine]:
    rows = await get_sheets().get_values(get_settings().ORDER_LINKS_SHEET_ID, TABLE_RANGE)
    return [OrderLinkLine.from_row(row) for row in rows if row and row[0] == link_id]


async def get_link_details(link_id: str) -> Dict[str, Any]:
    lines = await get_link_lines(link_id)
    if not lines:
        raise NotFoundError("Order link not found")

    products = await get_products_by_id()
    items = []
    total = 0.0
    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            raise BackendError("Error fetching order details", error=f"Product not found: {line.product_id}")
        item = product.to_json()
        item["quantity"] = line.quantity
        items.append(item)
        total += product.price * line.quantity

    return {
        "linkId": link_id,
        "paymentStatus": payment_status_of(lines),
        "products": items,
        "totalAmount": json_float(total),
    }


async def update_payment_status(link_id: str, status: str) -> int:
    """Set the payment status on every row of ``link_id``.

    The sheet is read, cleared and rewritten under the OrderLinks lock.
    Returns the number of rows changed.
    """
    settings = get_settings()
    sheets = get_sheets()
    spreadsheet_id = settings.ORDER_LINKS_SHEET_ID
    async with get_locks().hold(spreadsheet_id):
        rows = await sheets.get_values(spreadsheet_id, TABLE_RANGE)
        updated, matched = with_payment_status(rows, link_id, status)
        if not matched:
            raise NotFoundError("Order link not found")
        await sheets.clear_values(spreadsheet_id, TABLE_RANGE)
        try:
            await sheets.update_values(spreadsheet_id, TABLE_RANGE, updated)
        except Exception:
            _logger.error(
                "OrderLinks cleared but write-back failed | spreadsheet_id=%s rows=%s", spreadsheet_id, len(updated)
            )
            raise
    _logger.info("Payment status updated | link_id=%s status=%s rows=%s", link_id, status, matched)
    return matched
