"""
订单生命周期引擎
管理订单状态流转，以及流转触发的库存增减

库存规则：
- 报价（quote）不占用库存
- 离开 quote 进入 pending/ready/completed 时扣减库存
- 已扣减的订单被取消时退回库存
- 其余流转不影响库存
"""
from typing import Dict, Optional, Tuple

from ms_core.models import Order, OrderStatus, BoardColumn
from ms_core.utils.logger import get_logger, LogContext
from .catalog import ProductCatalog
from .order_store import OrderStore

logger = get_logger(__name__)

DEDUCT = -1
NO_CHANGE = 0
RETURN = 1

# (原状态, 目标状态) -> 库存变化方向；表中没有的组合不是合法流转
STOCK_EFFECTS: Dict[Tuple[OrderStatus, OrderStatus], int] = {
    (OrderStatus.QUOTE, OrderStatus.PENDING): DEDUCT,
    (OrderStatus.QUOTE, OrderStatus.READY): DEDUCT,
    (OrderStatus.QUOTE, OrderStatus.COMPLETED): DEDUCT,
    (OrderStatus.QUOTE, OrderStatus.CANCELLED): NO_CHANGE,
    (OrderStatus.PENDING, OrderStatus.READY): NO_CHANGE,
    (OrderStatus.PENDING, OrderStatus.COMPLETED): NO_CHANGE,
    (OrderStatus.PENDING, OrderStatus.CANCELLED): RETURN,
    (OrderStatus.READY, OrderStatus.COMPLETED): NO_CHANGE,
    (OrderStatus.READY, OrderStatus.CANCELLED): RETURN,
    # 已完成订单退货
    (OrderStatus.COMPLETED, OrderStatus.CANCELLED): RETURN,
}

# 流水线的下一步
NEXT_STATUS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.QUOTE: OrderStatus.PENDING,
    OrderStatus.PENDING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}


def is_transition_allowed(current: OrderStatus, target: OrderStatus) -> bool:
    return (current, target) in STOCK_EFFECTS


def stock_effect(current: OrderStatus, target: OrderStatus) -> Optional[int]:
    """返回流转的库存方向；同状态为 0，非法流转为 None"""
    if current == target:
        return NO_CHANGE
    return STOCK_EFFECTS.get((current, target))


class OrderLifecycleEngine:
    """订单生命周期引擎

    引擎从不抛出异常：缺失的商品被跳过，缺失的订单或非法流转视为空操作
    """

    def __init__(self, catalog: ProductCatalog, orders: OrderStore):
        self.catalog = catalog
        self.orders = orders

    def create_order(self, order: Order) -> Order:
        """
        保存新订单

        非报价订单立即扣减库存。ID 已存在时不做任何变更，返回已存储的订单
        """
        with LogContext(order_id=order.id):
            stored = self.orders.get(order.id)
            if stored is not None:
                logger.warning("Order create skipped, id already exists", status=stored.status.value)
                return stored

            self.orders.insert(order)
            if not order.is_quote:
                self._apply_stock(order, DEDUCT)
            logger.info("Order created", status=order.status.value, items=len(order.items), total=order.total)
        return order

    def update_order(self, previous: Order, updated: Order) -> Optional[Order]:
        """
        用新快照替换订单，并按状态变化调整库存

        以存储中的订单为准判断原状态，previous 只用于核对，
        因此重复提交同一组快照不会重复扣减
        """
        with LogContext(order_id=updated.id):
            stored = self.orders.get(updated.id)
            if stored is None:
                logger.warning("Order update skipped, unknown order")
                return None

            if previous.status != stored.status:
                logger.warning(
                    "Stale previous snapshot, using stored status",
                    previous_status=previous.status.value,
                    stored_status=stored.status.value,
                )

            if updated.items != stored.items or updated.total != stored.total:
                logger.warning("Order items are frozen after creation, ignoring item changes")

            return self._transition(stored, updated.status, customer_name=updated.customer_name)

    def transition_order(self, order_id: str, target: OrderStatus) -> Optional[Order]:
        """把订单流转到目标状态"""
        with LogContext(order_id=order_id):
            stored = self.orders.get(order_id)
            if stored is None:
                logger.warning("Order transition skipped, unknown order", target=target.value)
                return None
            return self._transition(stored, target)

    def advance_order(self, order_id: str) -> Optional[Order]:
        """沿流水线前进一步：quote → pending → ready → completed"""
        stored = self.orders.get(order_id)
        if stored is None:
            return None
        if stored.status.is_terminal:
            logger.debug("Order already in terminal status", order_id=order_id, status=stored.status.value)
            return stored
        return self.transition_order(order_id, NEXT_STATUS[stored.status])

    def move_order_to_column(self, order_id: str, column: BoardColumn) -> Optional[Order]:
        """看板拖拽：把订单放入某一列"""
        stored = self.orders.get(order_id)
        if stored is None:
            return None

        if column == BoardColumn.PROSPECTS:
            target = OrderStatus.QUOTE
        elif column == BoardColumn.IN_PROGRESS:
            target = OrderStatus.PENDING if stored.status == OrderStatus.QUOTE else stored.status
        else:
            target = OrderStatus.COMPLETED

        if target == stored.status:
            return stored
        return self.transition_order(order_id, target)

    def delete_order(self, order_id: str) -> bool:
        """删除订单记录，任何状态下都不影响库存"""
        deleted = self.orders.delete(order_id)
        if deleted:
            logger.info("Order deleted", order_id=order_id)
        return deleted

    def _transition(self, stored: Order, target: OrderStatus, **changes) -> Order:
        effect = stock_effect(stored.status, target)
        if effect is None:
            logger.warning(
                "Order transition rejected",
                current_status=stored.status.value,
                target_status=target.value,
            )
            return stored

        if effect != NO_CHANGE:
            self._apply_stock(stored, effect)

        result = stored.model_copy(update={"status": target, **changes})
        self.orders.replace(result)

        if target != stored.status:
            logger.info(
                "Order status changed",
                from_status=stored.status.value,
                to_status=target.value,
                stock_effect=effect,
            )
        return result

    def _apply_stock(self, order: Order, direction: int) -> None:
        """按订单行逐行调整库存，缺失的 SKU 跳过"""
        skipped = []
        for item in order.items:
            if not self.catalog.adjust_stock(item.sku, direction * item.quantity):
                skipped.append(item.sku)

        if skipped:
            logger.warning("Order lines skipped for stock, SKU not in catalog", skus=skipped)
