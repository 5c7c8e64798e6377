"""
MusicShop Configuration Management
遵循约束：环境变量前缀 MS__
"""
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = ("memory", "file", "sql", "redis")


class Settings(BaseSettings):
    """全局配置类"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MS__",
        case_sensitive=False
    )

    # Storage
    storage_backend: str = Field(default="file")
    data_dir: str = Field(default="data")
    db_url: str = Field(default="sqlite:///data/musicshop.db")
    db_echo: bool = Field(default=False)

    # Redis
    redis_host: str = Field(default="localhost")
    redis_port: int = Field(default=6379)
    redis_db: int = Field(default=0)
    redis_password: Optional[str] = Field(default=None)
    redis_key_prefix: str = Field(default="musicshop:")

    # 快照键
    products_key: str = Field(default="musicshop_products")
    orders_key: str = Field(default="musicshop_orders")
    config_key: str = Field(default="musicshop_config")

    # Monitoring
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text
    log_pii_masking: bool = Field(default=True)

    # 到岸成本默认参数
    default_exchange_rate: float = Field(default=60.5)
    default_courier_rate: float = Field(default=250.0)
    default_packaging: float = Field(default=50.0)

    # 库存提醒阈值默认值
    default_min_stock: int = Field(default=2)
    default_max_stock: int = Field(default=20)

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v):
        """确保存储后端受支持"""
        v = v.lower()
        if v not in STORAGE_BACKENDS:
            raise ValueError(f"storage_backend must be one of {', '.join(STORAGE_BACKENDS)}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def redis_url(self) -> str:
        """构建 Redis 连接字符串"""
        password = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{password}{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache()
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()
