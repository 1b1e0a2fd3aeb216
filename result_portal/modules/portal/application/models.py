"""Portal application models."""

from dataclasses import dataclass, field
from enum import StrEnum

from result_portal.modules.countdown.domain.state import CountdownState

SHARE_UNSUPPORTED_MESSAGE = "Sharing not supported on this browser."


class AppPhase(StrEnum):
    """应用阶段：LOADING → READY | FAILED。"""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class LinkActivation:
    """Outcome of a link click: where to navigate, or a notice to show instead."""

    link_id: int
    navigate_to: str | None = None
    notice: str | None = None

    @property
    def navigated(self) -> bool:
        return self.navigate_to is not None


@dataclass(frozen=True)
class SharePayload:
    title: str
    text: str
    url: str


@dataclass(frozen=True)
class ShareOutcome:
    payload: SharePayload | None = None
    message: str | None = None

    @property
    def supported(self) -> bool:
        return self.payload is not None


@dataclass(frozen=True)
class LinkView:
    id: int
    label: str
    url: str
    status: str
    available: bool
    last_used: bool


@dataclass(frozen=True)
class PortalView:
    """Presentation snapshot of the controller."""

    phase: AppPhase
    error: str | None = None
    countdown: CountdownState | None = None
    countdown_text: str = ""
    target_instant: str | None = None
    notification_text: str | None = None
    notification_visible: bool = False
    links: list[LinkView] = field(default_factory=list)
