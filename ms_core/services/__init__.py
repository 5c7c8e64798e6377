"""
MusicShop 服务
"""
from .base import ServiceResult
from .catalog import ProductCatalog
from .landed_cost import landed_cost
from .order_draft import OrderDraft
from .order_lifecycle import OrderLifecycleEngine, STOCK_EFFECTS, is_transition_allowed, stock_effect
from .order_store import OrderStore
from .reports import InventorySummary, export_inventory_csv, summarize_inventory
from .sku_generator import generate_sku, sku_exists
from .snapshot_store import (
    SnapshotStore, MemorySnapshotStore, FileSnapshotStore, SqlSnapshotStore, RedisSnapshotStore,
    create_snapshot_store,
)
from .state_manager import ShopState

__all__ = [
    "ServiceResult",
    "ProductCatalog",
    "landed_cost",
    "OrderDraft",
    "OrderLifecycleEngine",
    "STOCK_EFFECTS",
    "is_transition_allowed",
    "stock_effect",
    "OrderStore",
    "InventorySummary",
    "export_inventory_csv",
    "summarize_inventory",
    "generate_sku",
    "sku_exists",
    "SnapshotStore",
    "MemorySnapshotStore",
    "FileSnapshotStore",
    "SqlSnapshotStore",
    "RedisSnapshotStore",
    "create_snapshot_store",
    "ShopState",
]
