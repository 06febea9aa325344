# agentek/client/cache.py
"""
带过期时间的内存缓存
由调用方创建并注入到需要缓存外部数据的工具中
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class TTLCache:
    """键值缓存，每个条目在 ttl 秒后过期"""

    def __init__(self, ttl: float, max_size: int = 100):
        if ttl < 0:
            raise ValueError("ttl 不能为负数")
        self.ttl = ttl
        self.max_size = max_size
        self.cache: Dict[str, tuple] = {}  # {cache_key: (data, timestamp)}

    def get(self, key: str) -> Optional[Any]:
        """从缓存获取数据，过期返回 None"""
        if key in self.cache:
            data, timestamp = self.cache[key]

            # 检查是否过期
            if datetime.now() - timestamp < timedelta(seconds=self.ttl):
                return data
            else:
                # 删除过期缓存
                del self.cache[key]

        return None

    def set(self, key: str, data: Any):
        """缓存数据"""
        self.cache[key] = (data, datetime.now())

        # 清理过多的缓存
        if len(self.cache) > self.max_size:
            self.cleanup()

    def cleanup(self):
        """清理过期缓存，仍然超出容量时丢弃最旧的条目"""
        now = datetime.now()
        expired_keys = [
            key for key, (_, timestamp) in self.cache.items()
            if now - timestamp >= timedelta(seconds=self.ttl)
        ]

        for key in expired_keys:
            del self.cache[key]

        overflow = len(self.cache) - self.max_size
        if overflow > 0:
            oldest = sorted(self.cache.items(), key=lambda item: item[1][1])[:overflow]
            for key, _ in oldest:
                del self.cache[key]

        logger.debug(f"清理了 {len(expired_keys)} 个过期缓存")

    def clear(self):
        self.cache.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self.cache)
