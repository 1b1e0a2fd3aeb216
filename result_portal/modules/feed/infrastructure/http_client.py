"""HTTP implementation of the result feed client."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any

import httpx
from loguru import logger

from result_portal.core.config import settings
from result_portal.modules.feed.domain.client import LinkFeedClient
from result_portal.modules.feed.domain.entities import ResultFeed, ResultLink
from result_portal.modules.feed.domain.exceptions import NetworkError, ProtocolError


class HttpLinkFeedClient(LinkFeedClient):
    """Fetch the result feed with a single GET.

    Expected payload::

        {
          "resultDate": "2025-04-25T10:00:00+05:30",
          "notificationDate": "Results on 25 April, 10 AM",
          "links": [{"id": 1, "url": "https://...", "status": "active"}]
        }
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.RESULT_LINKS_URL
        self.timeout_sec = timeout_sec or settings.FEED_TIMEOUT_SEC
        self._transport = transport

    async def fetch(self) -> ResultFeed:
        start_time = time.time()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_sec,
                follow_redirects=False,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    self.url,
                    headers={
                        "User-Agent": settings.FEED_USER_AGENT,
                        "Accept": "application/json",
                    },
                )
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            logger.warning(f"Feed request failed for {self.url}: {exc!r}")
            raise NetworkError(str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning(f"Feed HTTP error for {self.url}: {response.status_code}")
            raise ProtocolError.from_status(response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProtocolError(f"Malformed JSON in feed response: {exc}") from exc

        feed = self.parse_payload(payload)
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Feed loaded from {self.url}: {len(feed.links)} links in {duration_ms}ms"
        )
        return feed

    @classmethod
    def parse_payload(cls, payload: Any) -> ResultFeed:
        if not isinstance(payload, dict):
            raise ProtocolError("Feed payload must be a JSON object")

        target_instant = cls._parse_result_date(payload.get("resultDate"))

        notification = payload.get("notificationDate")
        if notification is not None and not isinstance(notification, str):
            raise ProtocolError("Feed field 'notificationDate' must be a string")

        links_raw = payload.get("links")
        if not isinstance(links_raw, list):
            raise ProtocolError("Feed payload missing 'links' list")

        links: list[ResultLink] = []
        seen_ids: set[int] = set()
        for index, raw_link in enumerate(links_raw):
            link = cls._parse_link(index, raw_link)
            if link.id in seen_ids:
                raise ProtocolError(f"Duplicate link id {link.id} in feed")
            seen_ids.add(link.id)
            links.append(link)

        return ResultFeed(
            target_instant=target_instant,
            notification_text=notification,
            links=tuple(links),
        )

    @staticmethod
    def _parse_result_date(value: object) -> datetime:
        if not isinstance(value, str) or not value.strip():
            raise ProtocolError("Feed payload missing 'resultDate'")
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise ProtocolError(f"Invalid 'resultDate': {value!r}") from exc

    @staticmethod
    def _parse_link(index: int, raw_link: object) -> ResultLink:
        if not isinstance(raw_link, dict):
            raise ProtocolError(f"Feed link #{index} must be an object")

        link_id = raw_link.get("id")
        # bool is an int subclass
        if not isinstance(link_id, int) or isinstance(link_id, bool):
            raise ProtocolError(f"Feed link #{index} has invalid 'id'")

        url = raw_link.get("url")
        if not isinstance(url, str):
            raise ProtocolError(f"Feed link {link_id} has invalid 'url'")

        status = raw_link.get("status")
        if not isinstance(status, str):
            raise ProtocolError(f"Feed link {link_id} has invalid 'status'")

        return ResultLink(id=link_id, url=url, status=status)
