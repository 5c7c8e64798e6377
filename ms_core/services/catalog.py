"""
商品目录
以 SKU 为键保存商品，保持插入顺序
"""
from typing import Dict, Iterable, List, Optional

from ms_core.models import Product
from ms_core.utils.logger import get_logger

logger = get_logger(__name__)


class ProductCatalog:
    """商品目录"""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: Dict[str, Product] = {}
        for product in products or ():
            self._products[product.sku] = product

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, sku: str) -> bool:
        return sku in self._products

    def get(self, sku: str) -> Optional[Product]:
        return self._products.get(sku)

    def list(self) -> List[Product]:
        return list(self._products.values())

    def exists(self, sku: str) -> bool:
        """不区分大小写的存在性检查"""
        needle = sku.lower()
        return any(existing.lower() == needle for existing in self._products)

    def upsert(self, product: Product) -> bool:
        """按 SKU 新增或替换，返回是否为新增"""
        created = product.sku not in self._products
        self._products[product.sku] = product
        return created

    def delete(self, sku: str) -> bool:
        return self._products.pop(sku, None) is not None

    def adjust_stock(self, sku: str, delta: int) -> bool:
        """
        调整库存

        商品不存在时跳过并返回 False；库存允许变为负数
        """
        product = self._products.get(sku)
        if product is None:
            logger.debug("Stock adjustment skipped, unknown SKU", sku=sku, delta=delta)
            return False

        before = product.stock
        self._products[sku] = product.model_copy(update={"stock": before + delta})
        logger.info("Stock adjusted", sku=sku, delta=delta, stock_before=before, stock_after=before + delta)
        return True

    def search(self, term: str) -> List[Product]:
        """按名称或 SKU 模糊查找"""
        term = term.lower()
        return [p for p in self._products.values() if term in p.name.lower() or term in p.sku.lower()]
