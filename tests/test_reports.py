"""
库存报表测试
"""
import csv
import io

import pytest

from ms_core.models import AppConfig, Product
from ms_core.services import export_inventory_csv, summarize_inventory


def test_summary_counts_and_values(sample_products):
    config = AppConfig(exchange_rate=60, courier_rate=250, packaging=50)

    summary = summarize_inventory(sample_products, config)

    assert summary.product_count == 3
    assert summary.total_units == 16
    assert [p.sku for p in summary.low_stock] == ["YA003"]
    assert summary.overstocked == []
    assert summary.retail_value == pytest.approx(10 * 14500 + 5 * 11900 + 1 * 450)
    expected_landed = (
        10 * (120 * 60 + 4 * 250 + 50)
        + 5 * (95 * 60 + 3.5 * 250 + 50)
        + 1 * (4 * 60 + 0.1 * 250 + 50)
    )
    assert summary.landed_value == pytest.approx(expected_landed)


def test_threshold_edges():
    at_min = Product(sku="A", name="A", stock=2, min_stock=2, max_stock=5)
    over_max = Product(sku="B", name="B", stock=6, min_stock=2, max_stock=5)
    negative = Product(sku="C", name="C", stock=-1, min_stock=0, max_stock=5, price=10)

    summary = summarize_inventory([at_min, over_max, negative], AppConfig())

    assert [p.sku for p in summary.low_stock] == ["A", "C"]
    assert [p.sku for p in summary.overstocked] == ["B"]
    assert summary.retail_value == 0


def test_csv_export(sample_products):
    rows = list(csv.reader(io.StringIO(export_inventory_csv(sample_products))))

    assert rows[0] == ["SKU", "Name", "Sale Price", "Cost USD", "Stock", "Min", "Max"]
    assert rows[1] == ["RE001", "Bajo Redmond 4 cuerdas", "14500.0", "120.0", "10", "2", "20"]
    assert len(rows) == 4


def test_csv_quotes_commas():
    product = Product(sku="X1", name='Pedal "Fuzz", rojo', price=10)

    rows = list(csv.reader(io.StringIO(export_inventory_csv([product]))))

    assert rows[1][1] == 'Pedal "Fuzz", rojo'


def test_dashboard_dict(shop):
    data = shop.inventory_summary().to_dict()

    assert data["product_count"] == 3
    assert data["low_stock"] == ["YA003"]
