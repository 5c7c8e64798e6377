"""
到岸成本计算器
"""
from ms_core.models import AppConfig


def landed_cost(unit_cost: float, weight: float, config: AppConfig) -> float:
    """
    计算进口商品的本币到岸单位成本

    到岸成本 = 源币种单价 × 汇率 + 重量 × 单位运费 + 固定包装费
    不做输入校验，负数输入照常计算
    """
    return unit_cost * config.exchange_rate + weight * config.courier_rate + config.packaging
