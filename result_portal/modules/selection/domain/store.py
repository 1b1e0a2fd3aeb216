"""Selection store interface.

记录用户最近一次点击的结果链接 ID，仅用于 "last used" 高亮，不影响任何操作。
"""

from typing import Protocol

LAST_USED_KEY = "lastUsedPortal"


class SelectionStore(Protocol):
    """Durable single-entry store, last write wins."""

    def get(self) -> int | None:
        """Return the last activated link id, or ``None`` before any write."""
        ...

    def set(self, link_id: int) -> None:
        """Overwrite the stored link id."""
        ...


def decode_link_id(raw: str | None) -> int | None:
    """Parse the stored decimal string; anything else reads as absent."""
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def encode_link_id(link_id: int) -> str:
    return str(int(link_id))
