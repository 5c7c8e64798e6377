"""
快照编解码
商品列表、订单列表、配置对象与 JSON 字符串互转；损坏的快照被丢弃
"""
import json
from typing import Callable, List, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from ms_core.models import AppConfig, Order, Product
from ms_core.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_products_adapter = TypeAdapter(List[Product])
_orders_adapter = TypeAdapter(List[Order])


def dump_products(products: List[Product]) -> str:
    return _products_adapter.dump_json(products, by_alias=True).decode("utf-8")


def dump_orders(orders: List[Order]) -> str:
    return _orders_adapter.dump_json(orders, by_alias=True).decode("utf-8")


def dump_config(config: AppConfig) -> str:
    return config.model_dump_json(by_alias=True)


def _load(raw: Optional[str], parse: Callable[[str], T], default: Callable[[], T], kind: str) -> T:
    if raw is None:
        return default()
    try:
        return parse(raw)
    except (PydanticValidationError, json.JSONDecodeError, ValueError, TypeError) as e:
        logger.warning("Malformed snapshot discarded", snapshot=kind, error=str(e)[:200])
        return default()


def load_products(raw: Optional[str]) -> List[Product]:
    return _load(raw, _products_adapter.validate_json, list, "products")


def load_orders(raw: Optional[str]) -> List[Order]:
    return _load(raw, _orders_adapter.validate_json, list, "orders")


def load_config(raw: Optional[str], default: Optional[AppConfig] = None) -> AppConfig:
    return _load(raw, AppConfig.model_validate_json, lambda: default or AppConfig(), "config")
