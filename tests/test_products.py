"""
商品目录测试
"""
import pytest

from ms_core.models import Product
from ms_core.utils.errors import ConflictError, ValidationError


def test_upsert_replaces_by_sku(shop):
    shop.add_or_update_product(Product(sku="RE001", name="Bajo Redmond 5 cuerdas", stock=4))

    assert shop.get_product("RE001").name == "Bajo Redmond 5 cuerdas"
    assert len(shop.list_products()) == 3


def test_name_is_required(shop):
    with pytest.raises(ValidationError):
        shop.add_or_update_product(Product(sku="NEW1", name=" "))


def test_case_only_sku_clash_rejected(shop):
    with pytest.raises(ConflictError):
        shop.add_or_update_product(Product(sku="re001", name="Duplicado"))


def test_register_product_generates_sku_and_defaults(shop, settings):
    product = shop.register_product(name="Guitarra", brand="Ibanez", color="Red")

    assert product.sku == "IBR1004"
    assert product.min_stock == settings.default_min_stock
    assert product.max_stock == settings.default_max_stock


def test_register_product_collision(shop):
    shop.delete_product("CAW1002")
    shop.delete_product("YA003")
    shop.add_or_update_product(Product(sku="RE003", name="Otro"))

    with pytest.raises(ConflictError):
        shop.register_product(name="Bajo", brand="Redmond")


def test_delete_product(shop):
    assert shop.delete_product("YA003") is True
    assert shop.delete_product("YA003") is False
    assert shop.get_product("YA003") is None


def test_search(shop):
    assert [p.sku for p in shop.list_products("casio")] == ["CAW1002"]
    assert [p.sku for p in shop.list_products("re0")] == ["RE001"]


def test_import_products_partial(shop):
    result = shop.import_products([
        {"sku": "FE001", "name": "Pedal Fender", "costUsd": 30, "stock": 2},
        {"sku": "", "name": "Sin SKU"},
        {"sku": "ya003", "name": "Choque"},
    ])

    assert result.success
    assert result.data["saved"] == ["FE001"]
    assert [f["index"] for f in result.data["failed"]] == [1, 2]
    assert shop.get_product("FE001").cost_usd == 30


def test_import_products_all_invalid(shop):
    result = shop.import_products([{"name": "x"}])

    assert not result.success
    assert result.error_code == "PRODUCT_IMPORT_FAILED"
