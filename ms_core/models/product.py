"""
商品数据模型
快照字段使用 camelCase，与浏览器端保存的数据保持兼容
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """快照模型基类"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Product(SnapshotModel):
    """商品"""

    sku: str = Field(..., min_length=1, description="唯一 SKU，订单行以此引用商品")
    name: str = Field(default="")
    brand: str = Field(default="", description="品牌，用于生成 SKU")
    color: Optional[str] = Field(default=None, description="颜色，用于生成 SKU")

    # 成本输入
    cost_usd: float = Field(default=0.0, description="源币种单位成本")
    weight: float = Field(default=0.0, description="运费计算用重量")

    # 库存：超卖时允许为负
    stock: int = Field(default=0)
    min_stock: int = Field(default=2, description="低库存提醒阈值")
    max_stock: int = Field(default=20, description="超储提醒阈值")

    price: float = Field(default=0.0, description="本币售价")

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def is_overstocked(self) -> bool:
        return self.stock > self.max_stock
