"""
Redis 工具模块

提供全局 Redis 连接获取方法
"""
from typing import Optional

import redis

from ms_core.config import get_settings

_redis_client: Optional[redis.Redis] = None
_connection_pool: Optional[redis.ConnectionPool] = None


def get_redis() -> redis.Redis:
    """
    获取 Redis 客户端单例（使用连接池）

    Returns:
        redis.Redis: Redis 客户端
    """
    global _redis_client, _connection_pool

    if _redis_client is None:
        settings = get_settings()
        _connection_pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            max_connections=10,
            encoding="utf-8",
            decode_responses=True,
        )
        _redis_client = redis.Redis(connection_pool=_connection_pool)

    return _redis_client

