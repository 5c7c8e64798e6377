"""
MusicShop 数据库连接和会话管理
仅 sql 快照后端使用
"""
import time
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from ms_core.config import get_settings
from ms_core.utils.logger import get_logger
from ms_core.models.base import Base

logger = get_logger(__name__)

# 慢查询阈值（毫秒）
SLOW_QUERY_THRESHOLD_MS = 100


def _setup_slow_query_logging(engine: Engine) -> None:
    """为引擎设置慢查询监控"""
    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start_times = conn.info.get("query_start_time", [])
        if start_times:
            duration_ms = (time.perf_counter() - start_times.pop()) * 1000
            if duration_ms >= SLOW_QUERY_THRESHOLD_MS:
                sql = statement[:500] + "..." if len(statement) > 500 else statement
                logger.warning("Slow query", duration_ms=round(duration_ms, 1), sql=sql.replace("\n", " "))


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, db_url: Optional[str] = None):
        self.settings = get_settings()
        self.db_url = db_url or self.settings.db_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def create_engine(self) -> Engine:
        """创建数据库引擎"""
        if self._engine is None:
            self._engine = create_engine(
                self.db_url,
                pool_pre_ping=True,
                echo=self.settings.db_echo,
                future=True,
            )
            _setup_slow_query_logging(self._engine)
            logger.info("Created database engine", url=self._engine.url.render_as_string(hide_password=True))

        return self._engine

    def get_session_factory(self) -> sessionmaker:
        """获取会话工厂"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                self.create_engine(),
                class_=Session,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """获取数据库会话上下文管理器"""
        session = self.get_session_factory()()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def get_transaction(self) -> Generator[Session, None, None]:
        """获取事务上下文管理器"""
        with self.get_session() as session:
            with session.begin():
                yield session

    def create_tables(self) -> None:
        """创建所有表"""
        Base.metadata.create_all(self.create_engine())
        logger.info("Created all database tables")

    def close(self) -> None:
        """关闭数据库连接"""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Closed database engine")


# 全局数据库管理器实例
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """获取数据库管理器单例"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager

