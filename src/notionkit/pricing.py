"""Order price recalculation, run from a page-changed webhook.

The workspace layout this expects::

    Order page  (price property, relation to the client)
    ├── child database "Материалы"   rows with a numeric price
    └── child database "Работа"      rows with a numeric price

A webhook fires for a row of one of these child databases.  The handler
walks up to the order page, sums the prices of every row of the cost
tables, applies the client's discount and writes the result back to the
order page.  It knows nothing about HTTP; mount :func:`recalculate_price`
behind whatever route receives the webhook body.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from notionkit.async_client import AsyncNotionClient
from notionkit.errors import NotionKitError
from notionkit.models import (
    ChildDatabase,
    DatabaseParent,
    FormulaValue,
    NumberValue,
    Page,
    PageParent,
    PropertyValue,
    RelationValue,
    decode_page,
)
from notionkit.observability import error_fields, get_logger

log = get_logger("notionkit.pricing")


@dataclass(frozen=True)
class PriceSettings:
    """Names of the tables and properties the calculation reads and writes."""

    cost_tables: tuple[str, ...] = ("Материалы", "Работа")
    price_property: str = "Цена"
    client_relation: str = "🧔 Клиенты"
    discount_property: str = "Скидка"


@dataclass(frozen=True)
class PriceUpdate:
    """What was written to the order page."""

    page_id: str
    total: float
    discount: float
    price: float


class _DiscountUnavailable(Exception):
    pass


def numeric_value(value: PropertyValue | None) -> float:
    """The number held by a number property or a numeric formula, else 0."""
    if isinstance(value, NumberValue) and value.number is not None:
        return value.number
    if isinstance(value, FormulaValue) and value.number is not None:
        return value.number
    return 0.0


def sum_prices(rows: Iterable[Page], price_property: str) -> float:
    return sum(numeric_value(row.get_property(price_property)) for row in rows)


def apply_discount(total: float, discount: float) -> float:
    """``total`` reduced by *discount* percent."""
    return total * (1 - discount / 100)


async def _lookup_discount(
    client: AsyncNotionClient, order: Page, settings: PriceSettings
) -> float:
    relation = order.get_property(settings.client_relation)
    if not isinstance(relation, RelationValue):
        raise _DiscountUnavailable(f"{settings.client_relation!r} is not a relation")
    if not relation.relation:
        raise _DiscountUnavailable(f"{settings.client_relation!r} is empty")
    customer = await client.pages.retrieve(relation.relation[0])
    discount = customer.get_property(settings.discount_property)
    if not isinstance(discount, FormulaValue):
        raise _DiscountUnavailable(f"{settings.discount_property!r} is not a formula")
    value = discount.number or 0.0
    # A discount of exactly 1 is recorded as a placeholder, not as 1 %.
    return 0.0 if value == 1 else value


async def client_discount(
    client: AsyncNotionClient, order: Page, settings: PriceSettings
) -> float:
    """The ordering client's discount in percent; 0 when it cannot be found."""
    try:
        return await _lookup_discount(client, order, settings)
    except (NotionKitError, _DiscountUnavailable) as exc:
        log.warning(
            "Discount lookup failed; using 0",
            extra={"extra_fields": {"op": "pricing", "page_id": order.id, **error_fields(exc)}},
        )
        return 0.0


async def recalculate_price(
    client: AsyncNotionClient,
    payload: Mapping[str, Any],
    settings: PriceSettings | None = None,
) -> PriceUpdate | None:
    """Recompute and store the price of the order a changed row belongs to.

    Parameters
    ----------
    client:
        The client used for every read and the final update.
    payload:
        The webhook body; ``payload["data"]`` is the changed page.
    settings:
        Table and property names.  Defaults to :class:`PriceSettings`.

    Returns
    -------
    PriceUpdate | None
        The values written, or ``None`` when the changed page is not part
        of an order layout.

    Raises
    ------
    NotionRequestError
        When any call other than the discount lookup fails.
    ModelDecodeError
        When ``payload["data"]`` is not a page.
    """
    settings = settings or PriceSettings()
    changed = decode_page(payload["data"])
    if not isinstance(changed.parent, DatabaseParent):
        return None

    rows = await client.databases.query(changed.parent.database_id)
    if not rows.results:
        return None
    first = rows.results[0]
    if not isinstance(first.parent, DatabaseParent):
        return None

    database = await client.databases.retrieve(first.parent.database_id)
    if not isinstance(database.parent, PageParent):
        return None
    order_id = database.parent.page_id

    total = 0.0
    for block in await client.blocks.list_all_children(order_id):
        content = block.content
        if isinstance(content, ChildDatabase) and content.title in settings.cost_tables:
            table_rows = await client.databases.query_all(block.id)
            total += sum_prices(table_rows, settings.price_property)

    order = await client.pages.retrieve(order_id)
    discount = await client_discount(client, order, settings)
    price = apply_discount(total, discount)

    await client.pages.update(
        order_id,
        properties={settings.price_property: NumberValue(number=price)},
    )
    log.info(
        "Order price updated",
        extra={
            "extra_fields": {
                "op": "pricing",
                "page_id": order_id,
                "total": total,
                "discount": discount,
                "price": price,
            }
        },
    )
    return PriceUpdate(page_id=order_id, total=total, discount=discount, price=price)
