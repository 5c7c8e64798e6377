"""
到岸成本测试
"""
import pytest

from ms_core.models import AppConfig
from ms_core.services import landed_cost


def test_landed_cost_formula():
    config = AppConfig(exchange_rate=60, courier_rate=250, packaging=50)

    assert landed_cost(100, 2, config) == 6550


def test_default_config_values():
    config = AppConfig()

    assert landed_cost(1, 0, config) == pytest.approx(60.5 + 50.0)


def test_negative_inputs_are_not_validated():
    config = AppConfig(exchange_rate=60, courier_rate=250, packaging=50)

    assert landed_cost(-10, -1, config) == -600 - 250 + 50


def test_shop_uses_current_config(shop):
    shop.update_config(exchange_rate=58.0, courier_rate=200.0, packaging=0.0)

    assert shop.landed_cost(10, 1) == pytest.approx(780.0)
    assert shop.product_landed_cost(shop.get_product("YA003")) == pytest.approx(4 * 58 + 0.1 * 200)


def test_update_config_keeps_unset_values(shop):
    shop.update_config(packaging=75.0)

    assert shop.config.exchange_rate == 60.5
    assert shop.config.packaging == 75.0
