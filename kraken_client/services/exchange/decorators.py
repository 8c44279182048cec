"""
Decorators for exchange API calls.

Provides call logging for dispatcher operations.
"""

import functools
import time
from typing import Callable, Any

from kraken_client.core.logger import get_logger

logger = get_logger(__name__)


def log_api_call(func: Callable) -> Callable:
    """
    API call logging decorator

    Logs the endpoint, visibility, outcome and elapsed time of a call that
    returns an ApiResult. Parameters are not logged since private calls
    carry the nonce and OTP.

    Example:
        @log_api_call
        async def send(self, visibility, endpoint, params=None):
            ...
    """
    @functools.wraps(func)
    async def wrapper(self, visibility, endpoint, *args, **kwargs) -> Any:
        start_time = time.monotonic()
        label = f"{getattr(visibility, 'value', visibility)}/{endpoint}"

        logger.debug(f"API call: {label} started")

        try:
            result = await func(self, visibility, endpoint, *args, **kwargs)
        except Exception as e:
            duration = time.monotonic() - start_time
            logger.error(f"API call: {label} raised after {duration:.2f}s: {e}")
            raise

        duration = time.monotonic() - start_time
        if result.ok:
            logger.debug(f"API call: {label} completed in {duration:.2f}s")
        else:
            logger.warning(
                f"API call: {label} failed after {duration:.2f}s "
                f"[{result.kind.value}] {result.message}"
            )

        return result

    return wrapper
