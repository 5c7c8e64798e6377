"""
订单存储
以订单 ID 为键，列表按新到旧排列
"""
from typing import Dict, Iterable, List, Optional

from ms_core.models import Order, OrderStatus, BoardColumn, COLUMN_STATUSES


class OrderStore:
    """订单存储"""

    def __init__(self, orders: Optional[Iterable[Order]] = None):
        # 保存顺序即展示顺序（新订单在前）
        self._orders: Dict[str, Order] = {}
        for order in orders or ():
            self._orders[order.id] = order

    def __len__(self) -> int:
        return len(self._orders)

    def __contains__(self, order_id: str) -> bool:
        return order_id in self._orders

    def get(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def list(self) -> List[Order]:
        return list(self._orders.values())

    def insert(self, order: Order) -> None:
        """新订单放到最前面"""
        self._orders = {order.id: order, **{k: v for k, v in self._orders.items() if k != order.id}}

    def replace(self, order: Order) -> bool:
        """按 ID 替换已有订单，位置不变"""
        if order.id not in self._orders:
            return False
        self._orders[order.id] = order
        return True

    def delete(self, order_id: str) -> bool:
        return self._orders.pop(order_id, None) is not None

    def with_status(self, *statuses: OrderStatus) -> List[Order]:
        return [o for o in self._orders.values() if o.status in statuses]

    def in_column(self, column: BoardColumn) -> List[Order]:
        return self.with_status(*COLUMN_STATUSES[column])

    def search(self, term: str) -> List[Order]:
        """按客户名或订单 ID 模糊查找"""
        term = term.lower()
        return [
            o for o in self._orders.values()
            if term in o.customer_name.lower() or term in o.id.lower()
        ]
