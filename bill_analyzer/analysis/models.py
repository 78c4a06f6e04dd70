from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LineItem:
    """A single purchased position on a bill."""

    name: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "totalPrice": self.total_price,
        }


@dataclass(frozen=True)
class BillAnalysisResult:
    """Structured data extracted from a bill image. Always has at least one item."""

    merchant_name: str
    items: list[LineItem]
    total_amount: Decimal
    currency: str
    category_tags: list[str] | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "merchantName": self.merchant_name,
            "items": [item.to_dict() for item in self.items],
            "totalAmount": self.total_amount,
            "currency": self.currency,
            "categoryTags": self.category_tags,
        }
