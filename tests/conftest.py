"""pytest 设定 - 测试模块的路径设置与公共夹具"""

import json
import sys
from pathlib import Path

import httpx
import pytest

# 项目根目录加入 sys.path，使 platforms / utils 可直接导入
project_root = Path(__file__).parent.parent
if str(project_root) in sys.path:
    sys.path.remove(str(project_root))
sys.path.insert(0, str(project_root))

from utils.http import RetryingHttpClient  # noqa: E402

ENV_KEYS = [
    "NINEBOT_ACCOUNTS",
    "NINEBOT_DEVICE_ID",
    "NINEBOT_AUTHORIZATION",
    "NINEBOT_NAME",
    "BARK_KEY",
    "BARK_URL",
    "BARK_GROUP",
    "BARK_ICON",
    "BARK_SOUND",
    "BARK_URL_JUMP",
    "BARK_COPY",
    "BARK_AUTO_COPY",
    "SERVERCHAN_KEY",
    "SERVERCHAN_URL",
    "PUSHOVER_TOKEN",
    "PUSHOVER_USER",
    "PUSHDEER_KEY",
    "PUSHDEER_URL",
    "PUSHDEER_TYPE",
    "DEBUG_MODE",
    "LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    """清除所有相关环境变量"""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class FakeNineBotApi:
    """按顺序返回预设响应的九号出行接口模拟

    status_responses / sign_responses 的元素可以是:
    - dict: 以 200 返回该 JSON
    - httpx.Response: 原样返回
    - Exception: 抛出（模拟传输错误）
    """

    def __init__(self, status_responses=None, sign_responses=None):
        self.status_responses = list(status_responses or [])
        self.sign_responses = list(sign_responses or [])
        self.requests: list[httpx.Request] = []

    @property
    def sign_calls(self) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith("/sign"))

    @property
    def status_calls(self) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith("/status"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/sign"):
            queue = self.sign_responses
        elif request.url.path.endswith("/status"):
            queue = self.status_responses
        else:
            return httpx.Response(404, json={"code": 404, "msg": "not found"})

        if not queue:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")

        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def http_client(self, retries: int = 3, label: str = "test") -> RetryingHttpClient:
        return RetryingHttpClient(
            headers={"Authorization": "token"},
            retries=retries,
            retry_delay=0,
            transport=httpx.MockTransport(self.handler),
            label=label,
        )


def status_body(sign_status: int, days=None) -> dict:
    data = {"currentSignStatus": sign_status}
    if days is not None:
        data["consecutiveDays"] = days
    return {"code": 0, "data": data, "msg": "ok"}


def json_body(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))
