import asyncio
from typing import Callable, TypeVar

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args, **kwargs) -> T:
    """Run a blocking function in the default executor.

    The Firestore client is synchronous; every repository call goes through
    here so request handlers never block the event loop.
    """
    return await asyncio.to_thread(func, *args, **kwargs)
