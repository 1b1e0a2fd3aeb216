"""Portal API schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class CountdownResponse(BaseModel):
    """Countdown state."""

    kind: Literal["pending", "expired"] = Field(..., description="倒计时状态")
    text: str = Field(..., description="展示文本")
    days: int | None = Field(None, ge=0)
    hours: int | None = Field(None, ge=0, le=23)
    minutes: int | None = Field(None, ge=0, le=59)
    seconds: int | None = Field(None, ge=0, le=59)


class LinkResponse(BaseModel):
    id: int = Field(..., description="链接ID")
    label: str = Field(..., description="展示名称")
    url: str = Field(..., description="链接地址")
    status: str = Field(..., description="状态")
    available: bool = Field(..., description="是否已开放")
    last_used: bool = Field(..., description="是否为最近使用")


class PortalViewResponse(BaseModel):
    """Portal snapshot for the presentation layer."""

    phase: Literal["loading", "ready", "failed"]
    error: str | None = None
    countdown: CountdownResponse | None = None
    countdown_text: str = ""
    target_instant: str | None = None
    notification_text: str | None = None
    notification_visible: bool = False
    links: list[LinkResponse] = Field(default_factory=list)


class LinkActivationResponse(BaseModel):
    link_id: int
    navigate_to: str | None = Field(None, description="跳转地址；占位链接为空")
    notice: str | None = Field(None, description="需要提示给用户的信息")


class NotificationResponse(BaseModel):
    visible: bool
    text: str | None = None


class ShareResponse(BaseModel):
    supported: bool
    title: str | None = None
    text: str | None = None
    url: str | None = None
    message: str | None = None
