"""
订单草稿测试
"""
import uuid

import pytest

from ms_core.models import OrderStatus
from ms_core.services import OrderDraft
from ms_core.utils.errors import ValidationError


@pytest.fixture
def draft(sample_products):
    d = OrderDraft("Luis Martínez")
    d.add_product(sample_products[0])
    return d


def test_add_product_uses_catalog_price(draft, sample_products):
    item = draft.items[0]

    assert item.sku == "RE001"
    assert item.quantity == 1
    assert item.price == sample_products[0].price
    assert item.total == sample_products[0].price


def test_adding_same_product_bumps_quantity(draft, sample_products):
    draft.add_product(sample_products[0])

    assert len(draft.items) == 1
    assert draft.items[0].quantity == 2
    assert draft.items[0].total == 2 * sample_products[0].price


def test_quantity_below_one_is_ignored(draft):
    assert draft.set_quantity("RE001", 0) is None
    assert draft.items[0].quantity == 1


def test_price_override_recomputes_total(draft):
    draft.set_quantity("RE001", 3)
    draft.set_price("RE001", 13000.0)

    assert draft.items[0].total == 39000.0
    assert draft.total == 39000.0


def test_remove_line(draft):
    assert draft.remove("RE001") is True
    assert draft.remove("RE001") is False
    assert draft.items == []


def test_submit_builds_order(draft, sample_products):
    draft.add_product(sample_products[1])

    order = draft.submit(OrderStatus.PENDING)

    assert uuid.UUID(order.id)
    assert order.customer_name == "Luis Martínez"
    assert order.status == OrderStatus.PENDING
    assert order.total == sample_products[0].price + sample_products[1].price
    assert order.date.tzinfo is not None


def test_submit_requires_customer(sample_products):
    d = OrderDraft("  ")
    d.add_product(sample_products[0])

    with pytest.raises(ValidationError) as exc_info:
        d.submit()

    assert exc_info.value.code == "MISSING_CUSTOMER"


def test_submit_requires_items():
    with pytest.raises(ValidationError) as exc_info:
        OrderDraft("Ana").submit()

    assert exc_info.value.code == "EMPTY_ORDER_ITEMS"


@pytest.mark.parametrize("status", [OrderStatus.READY, OrderStatus.COMPLETED, OrderStatus.CANCELLED])
def test_submit_rejects_later_statuses(draft, status):
    with pytest.raises(ValidationError):
        draft.submit(status)


def test_submitted_orders_get_distinct_ids(draft):
    assert draft.submit().id != draft.submit().id
