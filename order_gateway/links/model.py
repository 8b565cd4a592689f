import secrets
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..common.cells import cell, encode_row, parse_int

SHEET_NAME = "OrderLinks"
TABLE_RANGE = f"{SHEET_NAME}!A:E"
APPEND_RANGE = f"{SHEET_NAME}!A:D"
HEADER_RANGE = f"{SHEET_NAME}!A1:D1"
HEADER = ["Link ID", "Product ID", "Quantity", "Timestamp"]

COLUMNS: Dict[str, int] = {
    "linkId": 0,
    "productId": 1,
    "quantity": 2,
    "timestamp": 3,
    "paymentStatus": 4,
}
PAYMENT_STATUS_COLUMN = COLUMNS["paymentStatus"]
DEFAULT_PAYMENT_STATUS = "pending"


def generate_link_id() -> str:
    """16 lowercase hex characters from 8 random bytes."""
    return secrets.token_hex(8)


@dataclass
class OrderLinkLine:
    link_id: Optional[str]
    product_id: Optional[str]
    quantity: int
    timestamp: Optional[str] = None
    payment_status: Optional[str] = None

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "OrderLinkLine":
        return cls(
            link_id=cell(row, COLUMNS["linkId"]),
            product_id=cell(row, COLUMNS["productId"]),
            quantity=parse_int(cell(row, COLUMNS["quantity"])),
            timestamp=cell(row, COLUMNS["timestamp"]),
            payment_status=cell(row, COLUMNS["paymentStatus"]),
        )

    def to_row(self) -> List[str]:
        row = encode_row(
            {
                "linkId": self.link_id,
                "productId": self.product_id,
                "quantity": self.quantity,
                "timestamp": self.timestamp,
                "paymentStatus": self.payment_status,
            },
            COLUMNS,
        )
        # new lines leave the payment status column untouched
        if self.payment_status is None:
            row = row[:PAYMENT_STATUS_COLUMN]
        return row


def payment_status_of(lines: Sequence[OrderLinkLine]) -> str:
    if lines and lines[0].payment_status:
        return lines[0].payment_status
    return DEFAULT_PAYMENT_STATUS


def with_payment_status(rows: Sequence[Sequence[Any]], link_id: str, status: str):
    """Copy of ``rows`` with the payment status set on every row of ``link_id``.

    Returns ``(rows, matched)``; rows of other links are copied unchanged.
    """
    updated = []
    matched = 0
    for row in rows:
        new_row = list(row)
        if cell(new_row, COLUMNS["linkId"]) == link_id:
            if len(new_row) <= PAYMENT_STATUS_COLUMN:
                new_row.extend([""] * (PAYMENT_STATUS_COLUMN + 1 - len(new_row)))
            new_row[PAYMENT_STATUS_COLUMN] = status
            matched += 1
        updated.append(new_row)
    return updated, matched
