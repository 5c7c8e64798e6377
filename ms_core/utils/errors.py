"""
MusicShop 错误处理系统
遵循 RFC7807 Problem Details 标准
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC7807 Problem Details 模型"""
    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "type": "about:blank",
                "title": "Validation Failed",
                "status": 422,
                "detail": "brand must have at least 2 characters, got: 'R'",
                "code": "INVALID_BRAND"
            }
        }
    )

    type: str = Field(default="about:blank")
    title: str
    status: int
    detail: Optional[str] = None
    instance: Optional[str] = None
    code: Optional[str] = None  # 业务错误码


class MusicShopException(Exception):
    """MusicShop 基础异常类"""

    def __init__(
        self,
        status: int,
        code: str,
        title: str,
        detail: Optional[str] = None,
        **kwargs
    ):
        self.status = status
        self.code = code
        self.title = title
        self.detail = detail
        self.extra = kwargs
        super().__init__(detail or title)

    def to_problem_detail(self, instance: Optional[str] = None) -> ProblemDetail:
        """转换为 Problem Details 格式"""
        return ProblemDetail(
            type="about:blank",
            title=self.title,
            status=self.status,
            detail=self.detail,
            instance=instance,
            code=self.code,
            **self.extra
        )

    def to_dict(self, instance: Optional[str] = None) -> Dict[str, Any]:
        """转换为输出用字典"""
        return {
            "ok": False,
            "error": self.to_problem_detail(instance).model_dump(exclude_none=True)
        }


# 预定义错误类
class BadRequestError(MusicShopException):
    """400 错误请求"""
    def __init__(self, code: str, detail: str):
        super().__init__(
            status=400,
            code=code,
            title="Bad Request",
            detail=detail
        )


class NotFoundError(MusicShopException):
    """404 未找到"""
    def __init__(self, code: str, resource: str):
        super().__init__(
            status=404,
            code=code,
            title="Not Found",
            detail=f"{resource} not found"
        )


class ConflictError(MusicShopException):
    """409 冲突"""
    def __init__(self, code: str, detail: str):
        super().__init__(
            status=409,
            code=code,
            title="Conflict",
            detail=detail
        )


class ValidationError(MusicShopException):
    """422 验证失败"""
    def __init__(self, code: str, detail: str):
        super().__init__(
            status=422,
            code=code,
            title="Validation Failed",
            detail=detail
        )


class StorageError(MusicShopException):
    """500 快照存储失败"""
    def __init__(self, code: str = "STORAGE_FAILED", detail: str = "Snapshot storage failed", key: Optional[str] = None):
        super().__init__(
            status=500,
            code=code,
            title="Storage Error",
            detail=detail,
            key=key
        )
