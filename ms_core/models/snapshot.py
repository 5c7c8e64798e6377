"""
快照存储数据模型
每个键保存一份完整的 JSON 快照（商品列表、订单列表、配置）
"""
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SnapshotRecord(Base):
    """快照表"""
    __tablename__ = "snapshots"

    key: Mapped[str] = mapped_column(String(128), primary_key=True, comment="快照键")
    payload: Mapped[str] = mapped_column(Text, nullable=False, comment="JSON 快照内容")

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        comment="最后写入时间"
    )
