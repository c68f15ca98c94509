"""
重试装饰器模块

为异步函数提供固定间隔的重试机制（默认 3 次、每次间隔 2 秒），
不使用指数退避和随机抖动。
"""

import asyncio
import functools
import inspect
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from loguru import logger

T = TypeVar("T")

# 默认可重试的异常类型
DEFAULT_RETRY_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    Exception,
)


def retry_decorator(
    max_retries: int = 3,
    delay: float = 2.0,
    exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
    raise_on_failure: bool = False,
    default_return: Any = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[Optional[T]]]]:
    """
    重试装饰器，用于异步函数

    Args:
        max_retries: 最大尝试次数，默认3次
        delay: 两次尝试之间的固定间隔（秒），默认 2 秒
        exceptions: 需要重试的异常类型元组，默认所有 Exception
        on_retry: 每次失败后的回调函数，接收 (exception, attempt) 参数
        raise_on_failure: 所有重试失败后是否抛出最后一次异常，默认 False
        default_return: 所有重试失败后的默认返回值，默认 None

    Returns:
        装饰后的函数

    Raises:
        TypeError: 被装饰的不是协程函数

    Example:
        @retry_decorator(max_retries=3, delay=2.0, raise_on_failure=True)
        async def fetch_status():
            ...
    """
    retry_exceptions = exceptions or DEFAULT_RETRY_EXCEPTIONS

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Optional[T]]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"retry_decorator 只支持异步函数: {func.__name__}")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Optional[T]:
            last_exception: Optional[Exception] = None

            for attempt in range(1, max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_exceptions as e:
                    last_exception = e

                    if on_retry:
                        on_retry(e, attempt)

                    if attempt < max_retries:
                        logger.warning(
                            f"[{func.__name__}] 第 {attempt}/{max_retries} 次尝试失败: {e}. "
                            f"将在 {delay:.2f} 秒后重试..."
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.error(
                            f"[{func.__name__}] 所有 {max_retries} 次尝试均失败. "
                            f"最后错误: {e}"
                        )

            if raise_on_failure and last_exception:
                raise last_exception
            return default_return

        return wrapper

    return decorator
