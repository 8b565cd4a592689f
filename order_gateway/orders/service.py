import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..common.context import get_settings, get_sheets
from ..common.errors import BackendError
from .model import TABLE_RANGE, custom_sheet_range, decode_order, encode_order_lines

_logger = logging.getLogger(__name__)


async def check_orders_sheet() -> None:
    settings = get_settings()
    try:
        title = await get_sheets().get_spreadsheet_title(settings.GOOGLE_SHEETS_ID)
    except Exception as e:
        _logger.exception("Error accessing orders spreadsheet | spreadsheet_id=%s", settings.GOOGLE_SHEETS_ID)
        raise BackendError(
            "Failed to access spreadsheet. Please verify sharing permissions.", error=str(e)
        ) from e
    _logger.info("Accessed orders spreadsheet | title=%s", title)


async def _append_customizations(details: Mapping[str, Sequence[Sequence[Any]]]) -> List[str]:
    """Append every key's rows to its Custom-<key> sheet; returns the keys that failed."""
    settings = get_settings()
    sheets = get_sheets()
    keys = list(details.keys())
    results = await asyncio.gather(
        *(sheets.append_values(settings.GOOGLE_SHEETS_ID, custom_sheet_range(k), details[k]) for k in keys),
        return_exceptions=True,
    )
    failed = []
    for key, result in zip(keys, results):
        if isinstance(result, BaseException):
            _logger.error("Customization append failed | key=%s err=%s", key, result)
            failed.append(key)
    return failed


async def save_order(order: Mapping[str, Any]) -> int:
    """Append one row per product line plus customization rows.

    Returns the number of order rows written; raises BackendError naming the
    customization keys that could not be written.
    """
    settings = get_settings()
    await check_orders_sheet()

    rows = encode_order_lines(order, settings.PICKUP_CODE, settings.ORDER_COUNTRY)
    if rows:
        await get_sheets().append_values(settings.GOOGLE_SHEETS_ID, TABLE_RANGE, rows)
    _logger.info("Order saved | order_id=%s rows=%s", order.get("orderId"), len(rows))

    details = order.get("customizationDetails") or {}
    if details:
        failed = await _append_customizations(details)
        if failed:
            raise BackendError(
                "Order saved but some customization details could not be saved",
                error=f"Failed customization sheets: {', '.join(failed)}",
                failedCustomizations=failed,
            )
    return len(rows)


async def find_order(order_id: str) -> Optional[Dict[str, Any]]:
    rows = await get_sheets().get_values(get_settings().GOOGLE_SHEETS_ID, TABLE_RANGE)
    for row in rows:
        if row and row[0] == order_id:
            return decode_order(row)
    return None
