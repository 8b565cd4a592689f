import asyncio
import base64
from typing import Dict, List, Optional

import pytest

from order_gateway.app import create_app
from order_gateway.common.config import Settings

PRODUCTS_ID = "products-sheet"
LINKS_ID = "links-sheet"
ORDERS_ID = "orders-sheet"


class SheetsError(Exception):
    pass


def product_row(pid: str, name: str, price: str, **extra: str) -> List[str]:
    row = [""] * 35
    row[0], row[1], row[2], row[12] = pid, name, f"{name} description", price
    for index, value in extra.items():
        row[int(index.lstrip("c"))] = value
    return row


def _sheet_of(range_name: str) -> str:
    return range_name.split("!", 1)[0]


class FakeSheets:
    """In-memory stand-in for the Sheets client; records every call."""

    def __init__(self):
        self.titles: Dict[str, set] = {
            PRODUCTS_ID: {"Sheet1"},
            LINKS_ID: {"OrderLinks"},
            ORDERS_ID: {"Sheet1"},
        }
        self.tables: Dict[tuple, List[List[str]]] = {}
        self.calls: List[tuple] = []
        self.fail: Dict[str, Exception] = {}
        self.fail_ranges: Dict[str, Exception] = {}

    def table(self, spreadsheet_id: str, sheet: str) -> List[List[str]]:
        return self.tables.setdefault((spreadsheet_id, sheet), [])

    def _check(self, op: str, range_name: Optional[str] = None):
        if op in self.fail:
            raise self.fail[op]
        if range_name is not None and range_name in self.fail_ranges:
            raise self.fail_ranges[range_name]

    async def get_values(self, spreadsheet_id, range_name):
        self.calls.append(("get_values", spreadsheet_id, range_name))
        await asyncio.sleep(0)
        self._check("get_values", range_name)
        rows = self.table(spreadsheet_id, _sheet_of(range_name))
        if range_name.endswith("!A1:D1"):
            rows = rows[:1]
        if spreadsheet_id == PRODUCTS_ID:
            # products data starts at row 3
            rows = rows[2:]
        return [list(r) for r in rows]

    async def append_values(self, spreadsheet_id, range_name, rows):
        self.calls.append(("append_values", spreadsheet_id, range_name))
        self._check("append_values", range_name)
        self.table(spreadsheet_id, _sheet_of(range_name)).extend([list(r) for r in rows])

    async def update_values(self, spreadsheet_id, range_name, rows):
        self.calls.append(("update_values", spreadsheet_id, range_name))
        await asyncio.sleep(0)
        self._check("update_values", range_name)
        self.tables[(spreadsheet_id, _sheet_of(range_name))] = [list(r) for r in rows]

    async def clear_values(self, spreadsheet_id, range_name):
        self.calls.append(("clear_values", spreadsheet_id, range_name))
        self._check("clear_values", range_name)
        self.tables[(spreadsheet_id, _sheet_of(range_name))] = []

    async def get_sheet_titles(self, spreadsheet_id):
        self.calls.append(("get_sheet_titles", spreadsheet_id))
        self._check("get_sheet_titles")
        return set(self.titles.get(spreadsheet_id, set()))

    async def create_sheet(self, spreadsheet_id, title):
        self.calls.append(("create_sheet", spreadsheet_id, title))
        self._check("create_sheet")
        self.titles.setdefault(spreadsheet_id, set()).add(title)

    async def get_spreadsheet_title(self, spreadsheet_id):
        self.calls.append(("get_spreadsheet_title", spreadsheet_id))
        self._check("get_spreadsheet_title")
        return "Orders"

    def writes(self):
        return [c for c in self.calls if c[0] in {"append_values", "update_values", "clear_values", "create_sheet"}]


@pytest.fixture
def settings():
    return Settings(
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="s3cret",
        GOOGLE_SHEETS_CLIENT_EMAIL="svc@example.iam.gserviceaccount.com",
        GOOGLE_SHEETS_PRIVATE_KEY="unused",
        PRODUCTS_SHEET_ID=PRODUCTS_ID,
        ORDER_LINKS_SHEET_ID=LINKS_ID,
        GOOGLE_SHEETS_ID=ORDERS_ID,
        INSTANCE_ID="test",
        LOCK_BACKEND="local",
    )


@pytest.fixture
def sheets():
    fake = FakeSheets()
    fake.table(PRODUCTS_ID, "Sheet1").extend(
        [
            ["Products"],
            ["ID", "Name", "Description"],
            product_row("P1", "Mug", "100", c22="0.5", c30="red", c31="SKU-1", c32="10", c33="8", c34="8"),
            product_row("P2", "Tee", "50", c31="SKU-2"),
            ["P3", "Sticker"],
        ]
    )
    fake.table(LINKS_ID, "OrderLinks").append(["Link ID", "Product ID", "Quantity", "Timestamp"])
    return fake


@pytest.fixture
def app(settings, sheets):
    return create_app(settings=settings, sheets=sheets)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    token = base64.b64encode(b"admin:s3cret").decode()
    return {"Authorization": f"Bearer {token}"}
