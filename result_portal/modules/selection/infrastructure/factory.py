"""Selection store factory."""

from result_portal.core.config import Settings, settings
from result_portal.core.infrastructure.redis import RedisClient
from result_portal.modules.selection.infrastructure.stores import (
    InMemorySelectionStore,
    JsonFileSelectionStore,
    RedisSelectionStore,
)

SelectionStoreBackend = InMemorySelectionStore | JsonFileSelectionStore | RedisSelectionStore


def build_selection_store(config: Settings | None = None) -> SelectionStoreBackend:
    """Pick the backend named by ``SELECTION_STORE_BACKEND``."""
    config = config or settings
    if config.SELECTION_STORE_BACKEND == "memory":
        return InMemorySelectionStore()
    if config.SELECTION_STORE_BACKEND == "redis":
        return RedisSelectionStore(RedisClient(url=config.REDIS_URL))
    return JsonFileSelectionStore(config.SELECTION_STORE_PATH)
