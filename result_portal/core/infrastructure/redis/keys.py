"""Redis Key 命名规范。"""


class RedisKeys:
    """Redis Key 命名空间管理。"""

    # 用户选择
    # selection:{key}
    SELECTION_PREFIX = "selection"

    @classmethod
    def selection(cls, key: str) -> str:
        """生成选择记录 key。

        Args:
            key: 存储项名称（如 lastUsedPortal）

        Returns:
            格式化的 Redis key
        """
        return f"{cls.SELECTION_PREFIX}:{key}"
