"""
店铺状态管理器
持有商品目录、订单存储和到岸成本配置，所有变更经由此处并在变更后写入快照
"""
from typing import Any, Dict, List, Optional

from ms_core.config import Settings, get_settings
from ms_core.models import AppConfig, BoardColumn, COLUMN_STATUSES, Order, OrderStatus, Product
from ms_core.utils.errors import ConflictError, ValidationError
from ms_core.utils.logger import get_logger
from . import snapshot_codec
from .base import ServiceResult
from .catalog import ProductCatalog
from .landed_cost import landed_cost
from .order_lifecycle import OrderLifecycleEngine
from .order_store import OrderStore
from .reports import InventorySummary, export_inventory_csv, summarize_inventory
from .sku_generator import generate_sku
from .snapshot_store import SnapshotStore, create_snapshot_store

logger = get_logger(__name__)


class ShopState:
    """店铺状态（单用户、单线程）"""

    def __init__(self, store: SnapshotStore, settings: Optional[Settings] = None, load: bool = True):
        self.store = store
        self.settings = settings or get_settings()
        self.catalog = ProductCatalog()
        self.orders = OrderStore()
        self.config = self._default_config()
        self.engine = OrderLifecycleEngine(self.catalog, self.orders)
        if load:
            self.load()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ShopState":
        settings = settings or get_settings()
        return cls(create_snapshot_store(settings), settings)

    def _default_config(self) -> AppConfig:
        return AppConfig(
            exchange_rate=self.settings.default_exchange_rate,
            courier_rate=self.settings.default_courier_rate,
            packaging=self.settings.default_packaging,
        )

    # ---- 快照 ----

    def load(self) -> None:
        """从快照恢复状态；损坏的快照回退为默认值"""
        products = snapshot_codec.load_products(self.store.get(self.settings.products_key))
        orders = snapshot_codec.load_orders(self.store.get(self.settings.orders_key))
        self.config = snapshot_codec.load_config(
            self.store.get(self.settings.config_key), default=self._default_config()
        )

        self.catalog = ProductCatalog(products)
        self.orders = OrderStore(orders)
        self.engine = OrderLifecycleEngine(self.catalog, self.orders)
        logger.info("Shop state loaded", products=len(self.catalog), orders=len(self.orders))

    def close(self) -> None:
        self.store.close()

    def _save_products(self) -> None:
        self.store.set(self.settings.products_key, snapshot_codec.dump_products(self.catalog.list()))

    def _save_orders(self) -> None:
        self.store.set(self.settings.orders_key, snapshot_codec.dump_orders(self.orders.list()))

    def _save_config(self) -> None:
        self.store.set(self.settings.config_key, snapshot_codec.dump_config(self.config))

    # ---- 订单 ----

    def create_order(self, order: Order) -> Order:
        if order.id in self.orders:
            raise ConflictError(code="ORDER_EXISTS", detail=f"Order {order.id} already exists")
        created = self.engine.create_order(order)
        self._save_orders()
        if not created.is_quote:
            self._save_products()
        return created

    def update_order(self, previous: Order, updated: Order) -> Optional[Order]:
        result = self.engine.update_order(previous, updated)
        if result is not None:
            self._save_products()
            self._save_orders()
        return result

    def transition_order(self, order_id: str, target: OrderStatus) -> Optional[Order]:
        result = self.engine.transition_order(order_id, target)
        if result is not None:
            self._save_products()
            self._save_orders()
        return result

    def advance_order(self, order_id: str) -> Optional[Order]:
        result = self.engine.advance_order(order_id)
        if result is not None:
            self._save_products()
            self._save_orders()
        return result

    def move_order_to_column(self, order_id: str, column: BoardColumn) -> Optional[Order]:
        result = self.engine.move_order_to_column(order_id, column)
        if result is not None:
            self._save_products()
            self._save_orders()
        return result

    def delete_order(self, order_id: str) -> bool:
        deleted = self.engine.delete_order(order_id)
        if deleted:
            self._save_orders()
        return deleted

    def get_order(self, order_id: str) -> Optional[Order]:
        return self.orders.get(order_id)

    def orders_in_column(self, column: BoardColumn) -> List[Order]:
        """看板列中的订单"""
        return self.orders.in_column(column)

    def list_orders(self, search: Optional[str] = None, column: Optional[BoardColumn] = None) -> List[Order]:
        if not search:
            return self.orders_in_column(column) if column is not None else self.orders.list()
        orders = self.orders.search(search)
        if column is not None:
            orders = [o for o in orders if o.status in COLUMN_STATUSES[column]]
        return orders

    # ---- 商品 ----

    def add_or_update_product(self, product: Product) -> Product:
        """按 SKU 新增或替换商品"""
        if not product.name.strip():
            raise ValidationError(code="MISSING_PRODUCT_NAME", detail=f"Product {product.sku} needs a name")

        if product.sku not in self.catalog and self.catalog.exists(product.sku):
            raise ConflictError(
                code="SKU_CASE_CONFLICT",
                detail=f"SKU {product.sku} differs only in case from an existing SKU"
            )

        created = self.catalog.upsert(product)
        self._save_products()
        logger.info("Product saved", sku=product.sku, created=created)
        return product

    def register_product(self, sku: Optional[str] = None, **fields: Any) -> Product:
        """
        新建商品，未提供 SKU 时按品牌/颜色自动生成

        Raises:
            ValidationError: 字段不合法
            ConflictError: 自动生成的 SKU 已被占用
        """
        fields.setdefault("min_stock", self.settings.default_min_stock)
        fields.setdefault("max_stock", self.settings.default_max_stock)

        if not sku:
            sku = self.generate_sku(fields.get("brand", ""), fields.get("color"))
            if self.catalog.exists(sku):
                raise ConflictError(code="SKU_EXISTS", detail=f"Generated SKU {sku} already exists, provide one explicitly")

        return self.add_or_update_product(Product(sku=sku, **fields))

    def import_products(self, products: List[Dict[str, Any]]) -> ServiceResult[Dict[str, Any]]:
        """批量导入商品，逐条校验，失败的记录不影响其他记录"""
        saved, failed = [], []
        for index, raw in enumerate(products):
            try:
                product = Product.model_validate(raw)
                if not product.name.strip():
                    raise ValidationError(code="MISSING_PRODUCT_NAME", detail="Product needs a name")
                if product.sku not in self.catalog and self.catalog.exists(product.sku):
                    raise ConflictError(code="SKU_CASE_CONFLICT", detail=f"SKU {product.sku} conflicts by case")
            except (ValueError, ValidationError, ConflictError) as e:
                failed.append({"index": index, "error": str(e)})
                continue
            self.catalog.upsert(product)
            saved.append(product.sku)

        if saved:
            self._save_products()
        logger.info("Products imported", saved=len(saved), failed=len(failed))

        if not saved and failed:
            return ServiceResult.error(
                error=f"No products imported, {len(failed)} invalid",
                error_code="PRODUCT_IMPORT_FAILED",
            )
        return ServiceResult.ok({"saved": saved, "failed": failed})

    def delete_product(self, sku: str) -> bool:
        """删除商品；引用它的订单行之后在库存计算中被跳过"""
        deleted = self.catalog.delete(sku)
        if deleted:
            self._save_products()
            logger.info("Product deleted", sku=sku)
        return deleted

    def get_product(self, sku: str) -> Optional[Product]:
        return self.catalog.get(sku)

    def list_products(self, search: Optional[str] = None) -> List[Product]:
        return self.catalog.search(search) if search else self.catalog.list()

    def generate_sku(self, brand: str, color: Optional[str] = None) -> str:
        return generate_sku(brand, color, self.catalog.list())

    # ---- 配置与成本 ----

    def update_config(self, **changes: Any) -> AppConfig:
        """更新到岸成本参数"""
        merged = {**self.config.model_dump(), **{k: v for k, v in changes.items() if v is not None}}
        self.config = AppConfig.model_validate(merged)
        self._save_config()
        logger.info("Config updated", **self.config.model_dump())
        return self.config

    def landed_cost(self, unit_cost: float, weight: float) -> float:
        return landed_cost(unit_cost, weight, self.config)

    def product_landed_cost(self, product: Product) -> float:
        return landed_cost(product.cost_usd, product.weight, self.config)

    # ---- 报表 ----

    def inventory_summary(self) -> InventorySummary:
        return summarize_inventory(self.catalog.list(), self.config)

    def export_inventory_csv(self) -> str:
        return export_inventory_csv(self.catalog.list())
