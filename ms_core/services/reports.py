"""
库存报表
仪表盘汇总与 CSV 导出
"""
import csv
import io
from dataclasses import dataclass, field
from typing import List, Sequence

from ms_core.models import AppConfig, Product
from .landed_cost import landed_cost

CSV_HEADERS = ["SKU", "Name", "Sale Price", "Cost USD", "Stock", "Min", "Max"]


@dataclass
class InventorySummary:
    """仪表盘汇总"""
    product_count: int
    total_units: int
    landed_value: float
    retail_value: float
    low_stock: List[Product] = field(default_factory=list)
    overstocked: List[Product] = field(default_factory=list)

    def to_dict(self):
        return {
            "product_count": self.product_count,
            "total_units": self.total_units,
            "landed_value": round(self.landed_value, 2),
            "retail_value": round(self.retail_value, 2),
            "low_stock": [p.sku for p in self.low_stock],
            "overstocked": [p.sku for p in self.overstocked],
        }


def low_stock_products(products: Sequence[Product]) -> List[Product]:
    return [p for p in products if p.is_low_stock]


def overstocked_products(products: Sequence[Product]) -> List[Product]:
    return [p for p in products if p.is_overstocked]


def summarize_inventory(products: Sequence[Product], config: AppConfig) -> InventorySummary:
    """汇总库存；负库存不计入货值"""
    return InventorySummary(
        product_count=len(products),
        total_units=sum(p.stock for p in products),
        landed_value=sum(landed_cost(p.cost_usd, p.weight, config) * max(p.stock, 0) for p in products),
        retail_value=sum(p.price * max(p.stock, 0) for p in products),
        low_stock=low_stock_products(products),
        overstocked=overstocked_products(products),
    )


def export_inventory_csv(products: Sequence[Product]) -> str:
    """导出库存 CSV"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for p in products:
        writer.writerow([p.sku, p.name, p.price or 0, p.cost_usd, p.stock, p.min_stock, p.max_stock])
    return buffer.getvalue()
