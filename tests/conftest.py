"""Shared schema fixtures for coercion tests."""

from __future__ import annotations

import pytest

from schema_spec.factories import (
    LONG,
    STRING,
    array_of,
    decimal,
    enum,
    logical,
    map_of,
    nullable,
    record,
)
from schema_spec.types import RecordTypeSpec


@pytest.fixture
def line_schema() -> RecordTypeSpec:
    """Return an order line record with a decimal price."""
    return record(
        "OrderLine",
        {
            "sku": STRING,
            "price": decimal(10, 2),
            "quantity": LONG,
        },
        namespace="shop",
    )


@pytest.fixture
def order_schema(line_schema: RecordTypeSpec) -> RecordTypeSpec:
    """Return an order record nesting an array of order lines."""
    return record(
        "Order",
        {
            "order_id": LONG,
            "placed_on": logical("date"),
            "placed_at": logical("timestamp-micros"),
            "status": enum("Status", ("OPEN", "SHIPPED", "CLOSED")),
            "note": nullable(STRING),
            "lines": array_of(line_schema),
            "tags": map_of(STRING),
        },
        namespace="shop",
    )
