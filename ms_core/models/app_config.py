"""
应用配置数据模型（到岸成本参数）
"""
from pydantic import Field

from .product import SnapshotModel


class AppConfig(SnapshotModel):
    """到岸成本计算参数"""

    exchange_rate: float = Field(default=60.5, description="1 单位源币种兑本币")
    courier_rate: float = Field(default=250.0, description="每单位重量运费")
    packaging: float = Field(default=50.0, description="固定包装/处理费")
