"""统一的健康检查类型定义。"""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """健康检查状态枚举。"""

    OK = "ok"
    ERROR = "error"


class RedisHealthResult(BaseModel):
    """Redis 健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    connected: bool = Field(..., description="是否已连接")
    version: str | None = Field(None, description="Redis 版本")
    error: str | None = Field(None, description="错误信息")


class StoreHealthResult(BaseModel):
    """Selection store 健康检查结果。"""

    status: HealthStatus = Field(..., description="健康状态")
    backend: str = Field(..., description="存储后端")
    error: str | None = Field(None, description="错误信息")

    def to_dict(self) -> dict[str, str | None]:
        """转换为字典（用于 API 响应）。"""
        return self.model_dump(mode="json", exclude_none=False)
