"""
订单草稿
在边界处组装并校验订单，生命周期引擎只接收已校验的订单
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from ms_core.models import Order, OrderItem, OrderStatus, Product
from ms_core.utils.errors import ValidationError

# 草稿只能以报价或待处理状态提交
SUBMITTABLE_STATUSES = (OrderStatus.QUOTE, OrderStatus.PENDING)


class OrderDraft:
    """订单草稿"""

    def __init__(self, customer_name: str = ""):
        self.customer_name = customer_name
        self._items: List[OrderItem] = []

    @property
    def items(self) -> List[OrderItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        return sum(item.total for item in self._items)

    def _find(self, sku: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.sku == sku:
                return index
        return None

    def add_product(self, product: Product) -> OrderItem:
        """添加商品；已在草稿中时数量加 1"""
        index = self._find(product.sku)
        if index is not None:
            return self.set_quantity(product.sku, self._items[index].quantity + 1)

        item = OrderItem(sku=product.sku, name=product.name, quantity=1, price=product.price or 0.0)
        self._items.append(item)
        return item

    def set_quantity(self, sku: str, quantity: int) -> Optional[OrderItem]:
        """修改数量，小于 1 时忽略；库存不足只提示，不拦截"""
        index = self._find(sku)
        if index is None or quantity < 1:
            return None
        current = self._items[index]
        self._items[index] = OrderItem(sku=current.sku, name=current.name, quantity=quantity, price=current.price)
        return self._items[index]

    def set_price(self, sku: str, price: float) -> Optional[OrderItem]:
        """手动覆盖单价"""
        index = self._find(sku)
        if index is None:
            return None
        current = self._items[index]
        self._items[index] = OrderItem(sku=current.sku, name=current.name, quantity=current.quantity, price=price)
        return self._items[index]

    def remove(self, sku: str) -> bool:
        index = self._find(sku)
        if index is None:
            return False
        del self._items[index]
        return True

    def submit(self, status: OrderStatus = OrderStatus.QUOTE) -> Order:
        """
        生成订单

        Raises:
            ValidationError: 客户名为空、没有订单行或状态不允许
        """
        if not self.customer_name or not self.customer_name.strip():
            raise ValidationError(code="MISSING_CUSTOMER", detail="Customer name is required")
        if not self._items:
            raise ValidationError(code="EMPTY_ORDER_ITEMS", detail="Order must contain at least one item")
        if status not in SUBMITTABLE_STATUSES:
            raise ValidationError(
                code="INVALID_INITIAL_STATUS",
                detail=f"New orders start as 'quote' or 'pending', got: {status.value}"
            )

        return Order(
            id=str(uuid.uuid4()),
            customer_name=self.customer_name.strip(),
            date=datetime.now(timezone.utc),
            items=list(self._items),
            total=self.total,
            status=status,
        )
