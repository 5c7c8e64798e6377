"""
快照存储
字符串键值存储，每次变更后整体写入一份 JSON 快照（最后写入者生效）
"""
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from ms_core.config import Settings, get_settings
from ms_core.database import DatabaseManager, get_db_manager
from ms_core.models import SnapshotRecord
from ms_core.utils.redis import get_redis
from ms_core.utils.errors import StorageError
from ms_core.utils.logger import get_logger

logger = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class SnapshotStore(ABC):
    """快照存储接口"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """读取快照，不存在时返回 None"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """写入快照"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """删除快照"""

    def close(self) -> None:
        """释放后端连接"""


class MemorySnapshotStore(SnapshotStore):
    """内存存储（测试或临时使用）"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileSnapshotStore(SnapshotStore):
    """文件存储：每个键一个 JSON 文件"""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(code="INVALID_SNAPSHOT_KEY", detail=f"Invalid snapshot key: {key!r}", key=key)
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Snapshot read failed", key=key, path=str(path), exc_info=True)
            raise StorageError(detail=f"Failed to read snapshot: {e}", key=key)

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # 先写临时文件再替换，避免留下半份快照
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error("Snapshot write failed", key=key, path=str(path), exc_info=True)
            raise StorageError(detail=f"Failed to write snapshot: {e}", key=key)

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Snapshot delete failed", key=key, path=str(path), exc_info=True)
            raise StorageError(detail=f"Failed to delete snapshot: {e}", key=key)


class SqlSnapshotStore(SnapshotStore):
    """SQLAlchemy 存储：snapshots 表"""

    def __init__(self, db_manager=None):
        if db_manager is None:
            db_manager = get_db_manager()
        self.db_manager = db_manager
        self.db_manager.create_tables()

    def get(self, key: str) -> Optional[str]:
        try:
            with self.db_manager.get_session() as session:
                record = session.get(SnapshotRecord, key)
                return record.payload if record else None
        except SQLAlchemyError as e:
            logger.error("Snapshot read failed", key=key, exc_info=True)
            raise StorageError(detail=f"Failed to read snapshot: {e}", key=key)

    def set(self, key: str, value: str) -> None:
        try:
            with self.db_manager.get_transaction() as session:
                record = session.get(SnapshotRecord, key)
                if record is None:
                    session.add(SnapshotRecord(key=key, payload=value))
                else:
                    record.payload = value
        except SQLAlchemyError as e:
            logger.error("Snapshot write failed", key=key, exc_info=True)
            raise StorageError(detail=f"Failed to write snapshot: {e}", key=key)

    def delete(self, key: str) -> None:
        try:
            with self.db_manager.get_transaction() as session:
                record = session.get(SnapshotRecord, key)
                if record is not None:
                    session.delete(record)
        except SQLAlchemyError as e:
            logger.error("Snapshot delete failed", key=key, exc_info=True)
            raise StorageError(detail=f"Failed to delete snapshot: {e}", key=key)

    def close(self) -> None:
        self.db_manager.close()


class RedisSnapshotStore(SnapshotStore):
    """Redis 存储"""

    def __init__(self, client=None, key_prefix: str = "musicshop:"):
        if client is None:
            client = get_redis()
        self.client = client
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(self._key(key))
        except RedisError as e:
            logger.error("Snapshot read failed", key=key, exc_info=True)
            raise StorageError(detail=f"Failed to read snapshot: {e}", key=key)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value)
        except RedisError as e:
            logger.error("Snapshot write failed", key=key, exc_info=True)
            raise StorageError(detail=f"Failed to write snapshot: {e}", key=key)

    def delete(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except RedisError as e:
            logger.error("Snapshot delete failed", key=key, exc_info=True)
            raise StorageError(detail=f"Failed to delete snapshot: {e}", key=key)


def create_snapshot_store(settings: Optional[Settings] = None) -> SnapshotStore:
    """按配置创建快照存储"""
    settings = settings or get_settings()
    backend = settings.storage_backend

    if backend == "memory":
        store: SnapshotStore = MemorySnapshotStore()
    elif backend == "file":
        store = FileSnapshotStore(settings.data_dir)
    elif backend == "sql":
        if settings.db_url.startswith("sqlite:///") and not settings.db_url.startswith("sqlite:////"):
            # 相对路径的 SQLite 文件需要目录存在
            Path(settings.db_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
        store = SqlSnapshotStore(DatabaseManager(settings.db_url))
    else:
        store = RedisSnapshotStore(key_prefix=settings.redis_key_prefix)

    logger.info("Snapshot store ready", backend=backend)
    return store
