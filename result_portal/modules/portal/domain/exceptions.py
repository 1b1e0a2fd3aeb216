"""Portal domain exceptions."""

from result_portal.core.domain.exceptions import EntityNotFoundError


class LinkNotFoundError(EntityNotFoundError):
    """Raised when an activated link id is not in the loaded feed."""

    def __init__(self, link_id: int):
        super().__init__("Result link", str(link_id))
