"""Feed client interface."""

from abc import ABC, abstractmethod

from result_portal.modules.feed.domain.entities import ResultFeed


class LinkFeedClient(ABC):
    """Loads the result feed.

    Implementations make exactly one request per ``fetch`` call and never retry
    on their own; retries are an explicit caller decision.
    """

    @abstractmethod
    async def fetch(self) -> ResultFeed:
        """Return the parsed feed.

        Raises:
            NetworkError: the request could not complete
            ProtocolError: HTTP error status or malformed payload
        """
        ...
