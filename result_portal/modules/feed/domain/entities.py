"""Feed domain entities."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from result_portal.modules.countdown.domain.state import TargetInstant, as_local

UNAVAILABLE_NOTICE = "This link is currently not available. Please try again later."


def is_sentinel_url(url: str) -> bool:
    """Empty value or a bare fragment such as ``"#"`` means the portal is not live."""
    value = url.strip()
    return not value or value.startswith("#")


class ResultLink(BaseModel):
    """结果查询链接。"""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="链接ID（同一 feed 内唯一）")
    url: str = Field(..., description="绝对 URL 或占位值")
    status: str = Field(..., description="状态（仅展示用）")

    @property
    def is_available(self) -> bool:
        return not is_sentinel_url(self.url)

    @property
    def label(self) -> str:
        return f"Link {self.id}"


class ResultFeed(BaseModel):
    """远程 feed：发布时间、通知文本和结果链接。"""

    model_config = ConfigDict(frozen=True)

    target_instant: datetime = Field(..., description="结果发布时间")
    notification_text: str | None = Field(default=None, description="通知文本（原样展示）")
    links: tuple[ResultLink, ...] = Field(default=(), description="结果链接（保持顺序）")

    @field_validator("target_instant")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return as_local(value)

    @property
    def target(self) -> TargetInstant:
        return TargetInstant.at(self.target_instant)

    def find_link(self, link_id: int) -> ResultLink | None:
        for link in self.links:
            if link.id == link_id:
                return link
        return None
