import math

from order_gateway.common.cells import cell, encode_row, json_float, parse_float, parse_int, to_cell
from order_gateway.links.model import OrderLinkLine, generate_link_id, payment_status_of, with_payment_status
from order_gateway.products.model import COLUMNS, Product


def test_cell_tolerates_short_rows():
    assert cell(["a", "b"], 1) == "b"
    assert cell(["a", "b"], 5) is None


def test_parse_float_best_effort():
    assert parse_float("12.50") == 12.5
    assert parse_float(" 99 rupees") == 99.0
    assert parse_float(7) == 7.0
    assert math.isnan(parse_float("abc"))
    assert math.isnan(parse_float(None))
    assert parse_float("", default=0.0) == 0.0


def test_parse_int_takes_leading_integer():
    assert parse_int("3") == 3
    assert parse_int("2.9") == 2
    assert parse_int("x") == 0
    assert parse_int(None) == 0


def test_to_cell():
    assert to_cell(None) == ""
    assert to_cell(True) == "TRUE"
    assert to_cell(2) == "2"


def test_json_float_drops_nan():
    assert json_float(math.nan) is None
    assert json_float(1.5) == 1.5


def test_product_round_trip():
    product = Product(
        id="P9",
        name="Lamp",
        description="Desk lamp",
        price=45.5,
        weight="1.2",
        colors="black",
        SKU="LMP-9",
        height="40",
        length="20",
        breadth="15",
    )
    row = product.to_row()
    assert len(row) == max(COLUMNS.values()) + 1
    assert row[12] == "45.5"
    assert Product.from_row(row) == product


def test_product_from_short_row():
    product = Product.from_row(["P3", "Sticker"])
    assert product.id == "P3"
    assert product.description is None
    assert math.isnan(product.price)
    assert product.summary()["price"] is None


def test_encode_row_fills_gaps():
    assert encode_row({"a": 1, "c": None}, {"a": 0, "c": 2}) == ["1", "", ""]


def test_link_id_is_16_hex_chars():
    ids = {generate_link_id() for _ in range(50)}
    assert len(ids) == 50
    for link_id in ids:
        assert len(link_id) == 16
        assert link_id == link_id.lower()
        int(link_id, 16)


def test_new_link_line_has_four_cells():
    line = OrderLinkLine(link_id="abc", product_id="P1", quantity=2, timestamp="t")
    assert line.to_row() == ["abc", "P1", "2", "t"]


def test_payment_status_defaults_to_pending():
    lines = [OrderLinkLine.from_row(["abc", "P1", "1", "t"]), OrderLinkLine.from_row(["abc", "P2", "1", "t", "paid"])]
    assert payment_status_of(lines) == "pending"
    assert payment_status_of(lines[1:]) == "paid"


def test_with_payment_status_only_touches_matching_rows():
    rows = [["Link ID", "Product ID"], ["a", "P1", "1", "t"], ["b", "P2", "1", "t", "pending"], ["a", "P3", "1", "t", "x"]]
    updated, matched = with_payment_status(rows, "a", "paid")
    assert matched == 2
    assert updated[1] == ["a", "P1", "1", "t", "paid"]
    assert updated[2] == ["b", "P2", "1", "t", "pending"]
    assert updated[3][4] == "paid"
    assert rows[1] == ["a", "P1", "1", "t"]
