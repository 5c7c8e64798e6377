"""
枚举类型定义
"""

from enum import Enum


class OrderStatus(str, Enum):
    """订单状态枚举"""

    QUOTE = "quote"  # 报价：仅记录意向，不占用库存
    PENDING = "pending"  # 已确认，等待付款/备货
    READY = "ready"  # 可交付/发货
    COMPLETED = "completed"  # 已交付并关闭
    CANCELLED = "cancelled"  # 已取消

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


class BoardColumn(str, Enum):
    """订单看板列"""

    PROSPECTS = "prospects"
    IN_PROGRESS = "in_progress"
    FINALIZED = "finalized"


# 看板列包含的状态
COLUMN_STATUSES = {
    BoardColumn.PROSPECTS: (OrderStatus.QUOTE,),
    BoardColumn.IN_PROGRESS: (OrderStatus.PENDING, OrderStatus.READY),
    BoardColumn.FINALIZED: (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
}
