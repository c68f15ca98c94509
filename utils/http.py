"""
带重试的 HTTP 客户端

每次请求使用相同的静态请求头，传输错误、超时或非 2xx 状态码会触发重试，
重试耗尽后抛出 RequestError。响应体中的业务错误码不会触发重试。
"""

from typing import Any, Optional

import httpx
from loguru import logger

from utils.retry import retry_decorator

DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY = 2.0


class RequestError(Exception):
    """请求失败（重试耗尽或响应无法解析）"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        remote_msg: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.remote_msg = remote_msg

    @classmethod
    def from_httpx(cls, error: httpx.HTTPError) -> "RequestError":
        """从 httpx 异常构造，HTTP 错误附带状态码和服务端信息"""
        if isinstance(error, httpx.HTTPStatusError):
            response = error.response
            remote_msg = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    remote_msg = body.get("msg")
            except ValueError:
                pass
            return cls(
                f"状态码: {response.status_code}, 信息: {remote_msg or error}",
                status_code=response.status_code,
                remote_msg=remote_msg,
            )
        return cls(str(error) or type(error).__name__)


class RetryingHttpClient:
    """固定间隔重试的异步 HTTP 客户端"""

    def __init__(
        self,
        headers: dict,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        label: str = "http",
    ):
        """
        Args:
            headers: 每次请求都携带的请求头
            timeout: 单次请求超时（秒）
            retries: 最大尝试次数
            retry_delay: 两次尝试之间的固定间隔（秒）
            transport: 自定义传输层（测试时注入 httpx.MockTransport）
            label: 日志前缀，通常为账号名
        """
        self.headers = dict(headers)
        self.timeout = timeout
        self.retries = retries
        self.retry_delay = retry_delay
        self.label = label
        self.attempts = 0
        self._transport = transport

        self._send = retry_decorator(
            max_retries=retries,
            delay=retry_delay,
            exceptions=(httpx.HTTPError,),
            raise_on_failure=True,
        )(self._send_once)

    async def _send_once(self, method: str, url: str, json: Any = None) -> httpx.Response:
        self.attempts += 1
        logger.debug(f"[{self.label}] 尝试 {self.attempts}/{self.retries}: {method.upper()} {url}")

        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(method.upper(), url, json=json)
            response.raise_for_status()
            return response

    async def request(self, method: str, url: str, json: Any = None) -> Any:
        """发送请求并返回解析后的 JSON 响应体

        Raises:
            RequestError: 重试耗尽或响应体不是合法 JSON
        """
        self.attempts = 0
        try:
            response = await self._send(method, url, json=json)
        except httpx.HTTPError as e:
            raise RequestError.from_httpx(e) from e

        logger.debug(f"[{self.label}] 请求成功: {url}")

        try:
            return response.json()
        except ValueError as e:
            raise RequestError(f"响应解析失败: {e}", status_code=response.status_code) from e
