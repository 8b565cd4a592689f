import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from ..common.cells import cell, encode_row, json_float, parse_float

SHEET_NAME = "Sheet1"
# Rows 1-2 hold the sheet's headers
DATA_RANGE = f"{SHEET_NAME}!A3:AI"

COLUMNS: Dict[str, int] = {
    "id": 0,
    "name": 1,
    "description": 2,
    "price": 12,
    "weight": 22,
    "colors": 30,
    "SKU": 31,
    "height": 32,
    "length": 33,
    "breadth": 34,
}


@dataclass
class Product:
    id: Optional[str]
    name: Optional[str] = None
    description: Optional[str] = None
    price: float = math.nan
    weight: Optional[str] = None
    colors: Optional[str] = None
    SKU: Optional[str] = None
    height: Optional[str] = None
    length: Optional[str] = None
    breadth: Optional[str] = None

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Product":
        fields = {name: cell(row, index) for name, index in COLUMNS.items()}
        fields["price"] = parse_float(fields["price"])
        return cls(**fields)

    def to_row(self) -> list:
        return encode_row(self.__dict__, COLUMNS)

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": json_float(self.price),
        }

    def to_json(self) -> Dict[str, Any]:
        data = self.summary()
        data.update(
            {
                "SKU": self.SKU,
                "weight": self.weight,
                "length": self.length,
                "breadth": self.breadth,
                "height": self.height,
                "colors": self.colors,
            }
        )
        return data
