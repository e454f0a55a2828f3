# trans_desk/rate_limiter.py
"""本模块提供一个基于令牌桶算法的异步速率限制器，供翻译引擎保护公共实例。"""

import asyncio
import time


class RateLimiter:
    """一个异步安全的令牌桶（Token Bucket）。"""

    def __init__(self, refill_rate: float, capacity: float):
        if refill_rate <= 0 or capacity <= 0:
            raise ValueError("速率和容量必须为正数")
        self.refill_rate = refill_rate
        self.capacity = capacity
        self.tokens = capacity
        self.last_refill_time = time.monotonic()
        self._lock = asyncio.Lock()

    @classmethod
    def per_minute(cls, requests: int) -> "RateLimiter":
        return cls(refill_rate=requests / 60, capacity=requests)

    @classmethod
    def per_second(cls, requests: int) -> "RateLimiter":
        return cls(refill_rate=requests, capacity=requests)

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_refill_time
        if elapsed > 0:
            self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
            self.last_refill_time = now

    def try_acquire(self, tokens_needed: int = 1) -> bool:
        """不等待地尝试获取令牌，成功返回 True。"""
        self._refill()
        if self.tokens >= tokens_needed:
            self.tokens -= tokens_needed
            return True
        return False

    async def acquire(self, tokens_needed: int = 1) -> None:
        """异步获取指定数量的令牌，如果令牌不足则等待。"""
        if tokens_needed > self.capacity:
            raise ValueError("请求的令牌数不能超过桶的容量")

        while True:
            async with self._lock:
                if self.try_acquire(tokens_needed):
                    return
                wait_time = (tokens_needed - self.tokens) / self.refill_rate

            # 在锁外等待
            await asyncio.sleep(wait_time)
