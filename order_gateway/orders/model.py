from typing import Any, Dict, List, Mapping, Sequence

from ..common.cells import cell, encode_row, json_float, parse_float, parse_int

SHEET_NAME = "Sheet1"
TABLE_RANGE = f"{SHEET_NAME}!A:AG"
CUSTOM_SHEET_PREFIX = "Custom-"

# One row per product line of an order.
COLUMNS: Dict[str, int] = {
    "orderId": 0,
    "pickUpCode": 1,
    "phoneNumber": 2,
    "firstName": 3,
    "lastName": 4,
    "email": 5,
    "shippingAddressLine1": 6,
    "shippingAddressLine2": 7,
    "shippingPincode": 8,
    "shippingCity": 9,
    "shippingState": 10,
    "shippingCountry": 11,
    "billingAddressLine1": 12,
    "billingAddressLine2": 13,
    "billingPincode": 14,
    "billingCity": 15,
    "billingState": 16,
    "billingCountry": 17,
    "productName": 18,
    "unitPrice": 19,
    "quantity": 20,
    "SKU": 21,
    "PaymentMethod": 22,
    "COD": 23,
    "totalAmount": 24,
    "weight": 25,
    "length": 26,
    "breadth": 27,
    "height": 28,
    "courierId": 29,
    "paymentId": 30,
    "isThisMultipleProductOrder": 31,
    "timestamp": 32,
}

# Order-level fields copied onto every product line as-is.
_SHARED_FIELDS = (
    "orderId",
    "phoneNumber",
    "firstName",
    "lastName",
    "email",
    "shippingAddressLine1",
    "shippingAddressLine2",
    "shippingPincode",
    "shippingCity",
    "shippingState",
    "billingAddressLine1",
    "billingAddressLine2",
    "billingPincode",
    "billingCity",
    "billingState",
    "PaymentMethod",
    "COD",
    "totalAmount",
    "paymentId",
    "isThisMultipleProductOrder",
    "timestamp",
)


def encode_order_lines(
    order: Mapping[str, Any], pickup_code: str, country: str
) -> List[List[str]]:
    """One sheet row per entry of ``order["products"]``."""
    products = order.get("products") or []
    rows = []
    for product in products:
        record = {name: order.get(name) for name in _SHARED_FIELDS}
        record.update(
            {
                "pickUpCode": pickup_code,
                "shippingCountry": country,
                "billingCountry": country,
                "productName": product.get("name"),
                "unitPrice": product.get("price"),
                "quantity": product.get("quantity"),
                "SKU": product.get("SKU"),
                "weight": product.get("weight"),
                "length": product.get("length"),
                "breadth": product.get("breadth"),
                "height": product.get("height"),
                "courierId": "",
            }
        )
        rows.append(encode_row(record, COLUMNS))
    return rows


def _num(row: Sequence[Any], name: str) -> float:
    return json_float(parse_float(cell(row, COLUMNS[name]), default=0.0))


def decode_order(row: Sequence[Any]) -> Dict[str, Any]:
    def c(name):
        return cell(row, COLUMNS[name])

    return {
        "orderId": c("orderId"),
        "pickUpCode": c("pickUpCode"),
        "phoneNumber": c("phoneNumber"),
        "firstName": c("firstName"),
        "lastName": c("lastName"),
        "email": c("email"),
        "shippingAddress": {
            "addressLine1": c("shippingAddressLine1"),
            "addressLine2": c("shippingAddressLine2"),
            "pincode": c("shippingPincode"),
            "city": c("shippingCity"),
            "state": c("shippingState"),
            "country": c("shippingCountry"),
        },
        "billingAddress": {
            "addressLine1": c("billingAddressLine1"),
            "addressLine2": c("billingAddressLine2"),
            "pincode": c("billingPincode"),
            "city": c("billingCity"),
            "state": c("billingState"),
            "country": c("billingCountry"),
        },
        "product": {
            "name": c("productName"),
            "unitPrice": _num(row, "unitPrice"),
            "quantity": parse_int(c("quantity")),
            "SKU": c("SKU"),
        },
        "payment": {
            "method": c("PaymentMethod"),
            "COD": c("COD"),
            "totalAmount": _num(row, "totalAmount"),
            "paymentId": c("paymentId"),
        },
        "shipping": {
            "weight": _num(row, "weight"),
            "dimensions": {
                "length": _num(row, "length"),
                "breadth": _num(row, "breadth"),
                "height": _num(row, "height"),
            },
            "courierId": c("courierId"),
        },
        "isMultipleProductOrder": c("isThisMultipleProductOrder"),
        "timestamp": c("timestamp"),
    }


def custom_sheet_range(key: str) -> str:
    return f"{CUSTOM_SHEET_PREFIX}{key}!A:Z"
