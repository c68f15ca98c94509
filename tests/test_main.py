"""入口 main() 的测试"""

import asyncio

import httpx
import pytest

import ninebot_checkin
from conftest import FakeNineBotApi, status_body
from utils.notify import NotificationManager


@pytest.fixture
def no_dotenv(clean_env):
    """不读取本地 .env 文件"""
    clean_env.setattr(ninebot_checkin, "find_dotenv", lambda *args, **kwargs: "")
    clean_env.setattr(ninebot_checkin, "load_dotenv", lambda *args, **kwargs: False)
    return clean_env


class TestMainNoConfig:
    """未配置账号"""

    def test_returns_without_network_or_notification(self, no_dotenv):
        sent = []
        pushed = []

        def fake_sync_send(self, request, **kwargs):
            sent.append(request)
            raise AssertionError(f"unexpected request: {request.url}")

        async def fake_async_send(self, request, **kwargs):
            sent.append(request)
            raise AssertionError(f"unexpected request: {request.url}")

        no_dotenv.setattr(httpx.Client, "send", fake_sync_send)
        no_dotenv.setattr(httpx.AsyncClient, "send", fake_async_send)
        no_dotenv.setattr(
            NotificationManager,
            "push_message",
            lambda self, title, content: pushed.append(title),
        )

        assert asyncio.run(ninebot_checkin.main()) is None
        assert sent == []
        assert pushed == []


class TestMainSingleAccount:
    """单账号 + Bark"""

    def test_summary_pushed_once(self, no_dotenv):
        no_dotenv.setenv("NINEBOT_DEVICE_ID", "device-1")
        no_dotenv.setenv("NINEBOT_AUTHORIZATION", "token-1")
        no_dotenv.setenv("BARK_KEY", "bark-key")

        api = FakeNineBotApi(status_responses=[status_body(1, 5)])
        pushes = []

        async def fake_async_send(self, request, **kwargs):
            response = api.handler(request)
            response.request = request
            return response

        def fake_sync_send(self, request, **kwargs):
            pushes.append(request)
            return httpx.Response(200, json={"code": 200}, request=request)

        no_dotenv.setattr(httpx.AsyncClient, "send", fake_async_send)
        no_dotenv.setattr(httpx.Client, "send", fake_sync_send)

        assert asyncio.run(ninebot_checkin.main()) is None

        assert api.status_calls == 1
        assert api.sign_calls == 0
        assert len(pushes) == 1
        assert pushes[0].url.host == "api.day.app"
        assert "/bark-key/" in pushes[0].url.path
