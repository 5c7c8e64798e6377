"""
MusicShop 数据模型包
"""
from .base import Base
from .snapshot import SnapshotRecord
from .enums import OrderStatus, BoardColumn, COLUMN_STATUSES
from .product import SnapshotModel, Product
from .order import Order, OrderItem
from .app_config import AppConfig

__all__ = [
    "Base",
    "SnapshotRecord",
    "OrderStatus",
    "BoardColumn",
    "COLUMN_STATUSES",
    "SnapshotModel",
    "Product",
    "Order",
    "OrderItem",
    "AppConfig",
]
