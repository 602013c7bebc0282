from typing import TypeVar

from loguru import logger

from carebook.domain.exceptions import StoreError

T = TypeVar("T")


def keep_on_failure(what: str, result: list[T] | BaseException, prior: list[T]) -> list[T]:
    """Pick the outcome of one ``asyncio.gather(..., return_exceptions=True)`` read.

    A ``StoreError`` is logged and ``prior`` is returned unchanged. Any other
    exception is re-raised.
    """
    if isinstance(result, StoreError):
        logger.warning("Error fetching {}: {}", what, result)
        return prior
    if isinstance(result, BaseException):
        raise result
    return result
