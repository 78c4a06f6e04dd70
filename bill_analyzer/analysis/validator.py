"""Checks a decoded model answer against the bill result constraints."""

from decimal import Decimal, InvalidOperation
from typing import Any

from bill_analyzer.analysis.exceptions import BillAnalysisError, BillAnalysisErrorCode
from bill_analyzer.analysis.models import BillAnalysisResult, LineItem

_NO_ITEMS_MESSAGE = "Analysis result contains no line items"


def validate_and_build(data: dict[str, Any]) -> BillAnalysisResult:
    """Validate a decoded answer and build a BillAnalysisResult.

    All violated field paths are collected and reported together.

    Raises:
        BillAnalysisError: INVALID_RESPONSE when items are missing or any
            constraint is violated.
    """
    raw_items = data.get("items")
    if raw_items is None or (isinstance(raw_items, list) and not raw_items):
        raise BillAnalysisError(BillAnalysisErrorCode.INVALID_RESPONSE, _NO_ITEMS_MESSAGE)

    violations: list[str] = []
    merchant_name = _text(data.get("merchantName"), "merchantName", violations)
    items = _items(raw_items, violations)
    total_amount = _amount(data.get("totalAmount"), "totalAmount", violations, positive=False)
    currency = _text(data.get("currency"), "currency", violations)
    category_tags = _tags(data.get("categoryTags"), violations)

    if violations:
        raise BillAnalysisError(
            BillAnalysisErrorCode.INVALID_RESPONSE,
            "Analysis response failed validation: " + ", ".join(violations),
        )
    return BillAnalysisResult(
        merchant_name=merchant_name,
        items=items,
        total_amount=total_amount,
        currency=currency,
        category_tags=category_tags,
    )


def _items(raw: Any, violations: list[str]) -> list[LineItem]:
    if not isinstance(raw, list):
        violations.append("items")
        return []
    items: list[LineItem] = []
    for index, entry in enumerate(raw):
        path = f"items[{index}]"
        if not isinstance(entry, dict):
            violations.append(path)
            continue
        items.append(
            LineItem(
                name=_text(entry.get("name"), f"{path}.name", violations),
                quantity=_amount(
                    entry.get("quantity"), f"{path}.quantity", violations, positive=True
                ),
                unit_price=_amount(
                    entry.get("unitPrice"), f"{path}.unitPrice", violations, positive=False
                ),
                total_price=_amount(
                    entry.get("totalPrice"), f"{path}.totalPrice", violations, positive=False
                ),
            )
        )
    return items


def _text(raw: Any, path: str, violations: list[str]) -> str:
    if not isinstance(raw, str) or not raw.strip():
        violations.append(path)
        return ""
    return raw.strip()


def _amount(raw: Any, path: str, violations: list[str], *, positive: bool) -> Decimal:
    value = _to_decimal(raw)
    if value is None or (value <= 0 if positive else value < 0):
        violations.append(path)
        return Decimal(0)
    return value


def _to_decimal(raw: Any) -> Decimal | None:
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (Decimal, int, float, str)):
        try:
            value = Decimal(str(raw).strip()) if not isinstance(raw, Decimal) else raw
        except InvalidOperation:
            return None
        return value if value.is_finite() else None
    return None


def _tags(raw: Any, violations: list[str]) -> list[str] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        violations.append("categoryTags")
        return None
    tags: list[str] = []
    for index, tag in enumerate(raw):
        if not isinstance(tag, str):
            violations.append(f"categoryTags[{index}]")
            continue
        tags.append(tag)
    return tags
