"""
SKU 生成器

格式：[品牌][颜色标识][序号]，例如 RMB1021、CMW1023、UTR024
"""
from typing import Iterable, Optional, Sequence

from ms_core.models import Product
from ms_core.utils.errors import ValidationError

MIN_BRAND_LENGTH = 2
SEQUENCE_WIDTH = 3


def generate_sku(brand: str, color: Optional[str], existing_products: Sequence[Product]) -> str:
    """
    生成候选 SKU

    纯函数，不检查结果是否已被占用，调用方需另行调用 sku_exists

    Args:
        brand: 品牌名，至少 2 个字符
        color: 可选颜色名
        existing_products: 当前目录中的商品

    Returns:
        候选 SKU
    """
    brand = (brand or "").strip()
    if len(brand) < MIN_BRAND_LENGTH:
        raise ValidationError(
            code="INVALID_BRAND",
            detail=f"brand must have at least {MIN_BRAND_LENGTH} characters, got: {brand!r}"
        )

    brand_id = brand[:MIN_BRAND_LENGTH].upper()

    color_id = ""
    if color and color.strip():
        color_letter = color.strip()[0].upper()
        # 同品牌、同颜色首字母的已有商品数
        same_color = [
            p for p in existing_products
            if (p.brand or "").strip().lower() == brand.lower()
            and p.color and p.color.strip()
            and p.color.strip()[0].upper() == color_letter
        ]
        color_id = f"{color_letter}{len(same_color) + 1}"

    sequence = str(len(existing_products) + 1).zfill(SEQUENCE_WIDTH)

    return f"{brand_id}{color_id}{sequence}"


def sku_exists(sku: str, products: Iterable[Product]) -> bool:
    """SKU 是否已存在（不区分大小写）"""
    needle = sku.lower()
    return any(p.sku.lower() == needle for p in products)
