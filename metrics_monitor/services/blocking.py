import asyncio
import logging
from typing import Callable, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CallInFlight(RuntimeError):
    """Raised when an earlier call for the same key is still running."""


def _drain(future: "asyncio.Future") -> None:
    if not future.cancelled() and future.exception() is not None:
        logger.debug("Abandoned call finished with %r", future.exception())


class SingleFlight:
    """
    Run blocking calls in worker threads with a timeout, one per key at a time.

    A call that times out keeps running in its thread; until it returns, new
    calls for the same key fail fast with CallInFlight instead of starting
    another thread. This bounds the number of hung threads to the number of
    keys, so a stuck disk read never starves the CPU and memory reads.
    """

    def __init__(self):
        self._pending: Dict[str, "asyncio.Future"] = {}

    def busy(self, key: str) -> bool:
        future = self._pending.get(key)
        return future is not None and not future.done()

    async def run(self, key: str, func: Callable[[], T], timeout: float) -> T:
        if self.busy(key):
            raise CallInFlight(f"{key} is still running")

        future = asyncio.ensure_future(asyncio.to_thread(func))
        future.add_done_callback(_drain)
        self._pending[key] = future
        # shield: a timeout abandons the call but leaves it registered as pending
        return await asyncio.wait_for(asyncio.shield(future), timeout=timeout)
