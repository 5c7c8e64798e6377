"""
Pytest 配置和 fixtures
"""
import os
from datetime import datetime, timezone

import pytest

from ms_core.config import Settings, get_settings
from ms_core.models import Order, OrderItem, OrderStatus, Product
from ms_core.services import MemorySnapshotStore, ShopState


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """每个测试使用独立配置"""
    for key in list(os.environ):
        if key.upper().startswith("MS__"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("MS__DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("MS__LOG_FORMAT", "text")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def sample_products():
    """示例商品"""
    return [
        Product(
            sku="RE001", name="Bajo Redmond 4 cuerdas", brand="Redmond", color="Black",
            cost_usd=120.0, weight=4.0, stock=10, min_stock=2, max_stock=20, price=14500.0,
        ),
        Product(
            sku="CAW1002", name="Teclado Casio CT-S300", brand="Casio", color="White",
            cost_usd=95.0, weight=3.5, stock=5, min_stock=2, max_stock=10, price=11900.0,
        ),
        Product(
            sku="YA003", name="Cuerdas Yamaha", brand="Yamaha",
            cost_usd=4.0, weight=0.1, stock=1, min_stock=3, max_stock=30, price=450.0,
        ),
    ]


@pytest.fixture
def make_order():
    """订单工厂"""
    def _make(status=OrderStatus.QUOTE, items=None, order_id="order-1", customer_name="Ana Pérez"):
        items = items if items is not None else [
            OrderItem(sku="RE001", name="Bajo Redmond 4 cuerdas", quantity=2, price=14500.0),
            OrderItem(sku="CAW1002", name="Teclado Casio CT-S300", quantity=1, price=11000.0),
        ]
        return Order(
            id=order_id,
            customer_name=customer_name,
            date=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
            items=items,
            total=sum(item.total for item in items),
            status=status,
        )
    return _make


@pytest.fixture
def memory_store():
    return MemorySnapshotStore()


@pytest.fixture
def shop(memory_store, settings, sample_products):
    """带示例商品的内存店铺状态"""
    state = ShopState(memory_store, settings)
    for product in sample_products:
        state.add_or_update_product(product)
    return state


@pytest.fixture
def stock(shop):
    """读取当前库存"""
    return lambda sku: shop.get_product(sku).stock
