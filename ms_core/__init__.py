"""
MusicShop 核心模块
库存、到岸成本与销售流水线
"""

__version__ = "1.0.0"
