"""
订单数据模型
"""
from datetime import datetime
from typing import List

from pydantic import Field, model_validator

from .enums import OrderStatus
from .product import SnapshotModel


class OrderItem(SnapshotModel):
    """订单行（只属于一个订单）"""

    sku: str = Field(..., description="下单时的商品 SKU，之后不再校验")
    name: str = Field(default="")
    quantity: int = Field(..., ge=1)
    price: float = Field(..., description="单价，可手动覆盖目录价")
    total: float = Field(default=0.0)

    @model_validator(mode="after")
    def compute_total(self) -> "OrderItem":
        # total 始终等于 quantity × price
        self.total = self.quantity * self.price
        return self


class Order(SnapshotModel):
    """订单

    创建后只有 status（以及客户名）会变化，items/total 冻结
    """

    id: str = Field(..., min_length=1)
    customer_name: str = Field(default="")
    date: datetime
    items: List[OrderItem] = Field(default_factory=list)
    total: float = Field(default=0.0, description="保存时各行合计的快照")
    status: OrderStatus = OrderStatus.QUOTE

    @property
    def is_quote(self) -> bool:
        return self.status == OrderStatus.QUOTE
