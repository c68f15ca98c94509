#!/usr/bin/env python3
"""
通知模块

四个相互独立的推送渠道：Bark、Server酱、Pushover、PushDeer。
每个渠道未配置时直接跳过，发送失败只记录日志，不影响其他渠道。
"""

import re
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
from loguru import logger

from utils.config import BarkConfig, NotifyConfig, PushDeerConfig, PushoverConfig, ServerChanConfig

SUMMARY_TITLE = "九号出行签到结果"
DEFAULT_TIMEOUT = 10.0

DAY_PATTERN = re.compile(r"连续签到天数: (\d+)天")


class NotificationSender(ABC):
    """推送渠道基类"""

    name: str = "base"

    def __init__(self, client: httpx.Client):
        self.client = client

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        ...

    @abstractmethod
    def _deliver(self, title: str, message: str) -> bool:
        """发送消息，返回服务端是否接受"""

    def send(self, title: str, message: str) -> bool:
        """发送通知

        Returns:
            bool: True 表示服务端已接受，未配置或发送失败返回 False
        """
        if not self.is_configured:
            logger.info(f"未配置 {self.name}，跳过通知")
            return False

        try:
            ok = self._deliver(title, message)
        except Exception as e:
            logger.error(f"发送 {self.name} 通知异常: {e}")
            return False

        if ok:
            logger.success(f"{self.name} 通知发送成功")
        return ok


class BarkSender(NotificationSender):
    """Bark 推送

    标题和内容放在 URL 路径中，其余选项作为查询参数。
    复制文本中的 %day% 会替换为消息里的连续签到天数。
    """

    name = "Bark"
    timeout = 5.0

    def __init__(self, config: BarkConfig, client: httpx.Client):
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    @staticmethod
    def extract_day(message: str) -> str:
        match = DAY_PATTERN.search(message)
        return match.group(1) if match else "未知"

    def build_params(self, message: str) -> Dict[str, str]:
        params = {}
        if self.config.group:
            params["group"] = self.config.group
        if self.config.icon:
            params["icon"] = self.config.icon
        if self.config.sound:
            params["sound"] = self.config.sound
        if self.config.url_jump:
            params["url"] = self.config.url_jump
        if self.config.copy:
            params["copy"] = self.config.copy.replace("%day%", self.extract_day(message), 1)
        if self.config.auto_copy:
            params["autoCopy"] = "1"
        return params

    def build_url(self, title: str, message: str) -> str:
        return (
            f"{self.config.server}/{self.config.key}/"
            f"{quote(title, safe='')}/{quote(message, safe='')}"
        )

    def _deliver(self, title: str, message: str) -> bool:
        params = self.build_params(message)
        logger.info(f"发送 Bark 通知: {self.config.server} 参数: {sorted(params)}")

        response = self.client.get(
            self.build_url(title, message),
            params=params,
            timeout=self.timeout,
        )
        data = response.json()

        if data.get("code") == 200:
            return True
        logger.error(f"Bark 通知发送失败: {data}")
        return False


class ServerChanSender(NotificationSender):
    """Server酱推送，表单字段 title + desp，code 为 0 表示成功"""

    name = "Server酱"

    def __init__(self, config: ServerChanConfig, client: httpx.Client):
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def _deliver(self, title: str, message: str) -> bool:
        response = self.client.post(
            f"{self.config.server}/{self.config.key}.send",
            data={"title": title, "desp": message},
        )
        data = response.json()

        if data.get("code") == 0:
            return True
        logger.error(f"Server酱 通知发送失败: {data}")
        return False


class PushoverSender(NotificationSender):
    """Pushover 推送，status 为 1 表示成功"""

    name = "Pushover"
    API_URL = "https://api.pushover.net/1/messages.json"
    PRIORITY = 0
    SOUND = "pushover"

    def __init__(self, config: PushoverConfig, client: httpx.Client):
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def _deliver(self, title: str, message: str) -> bool:
        response = self.client.post(
            self.API_URL,
            data={
                "token": self.config.token,
                "user": self.config.user,
                "title": title,
                "message": message,
                "priority": self.PRIORITY,
                "sound": self.SOUND,
                "timestamp": int(time.time()),
            },
        )
        data = response.json()

        if data.get("status") == 1:
            return True
        logger.error(f"Pushover 通知发送失败: {data}")
        return False


class PushDeerSender(NotificationSender):
    """PushDeer 推送，参数 pushkey + text + desp，默认 markdown 格式"""

    name = "PushDeer"

    def __init__(self, config: PushDeerConfig, client: httpx.Client):
        super().__init__(client)
        self.config = config

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def _deliver(self, title: str, message: str) -> bool:
        response = self.client.get(
            f"{self.config.server}/message/push",
            params={
                "pushkey": self.config.key,
                "text": title,
                "desp": message,
                "type": self.config.msg_type,
            },
        )
        data = response.json()

        if data.get("code") == 0:
            return True
        logger.error(f"PushDeer 通知发送失败: {data}")
        return False


class NotificationManager:
    """通知管理器

    持有一个共享的 httpx.Client，按固定顺序依次调用所有渠道。

    Example:
        with NotificationManager(config.notify) as notify:
            notify.push_message(title, content)
    """

    def __init__(
        self,
        config: NotifyConfig,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.config = config
        self._transport = transport
        self._timeout = timeout
        self.client: Optional[httpx.Client] = None
        self.senders: List[NotificationSender] = []

    def __enter__(self) -> "NotificationManager":
        self.client = httpx.Client(transport=self._transport, timeout=self._timeout)
        self.senders = [
            BarkSender(self.config.bark, self.client),
            ServerChanSender(self.config.serverchan, self.client),
            PushoverSender(self.config.pushover, self.client),
            PushDeerSender(self.config.pushdeer, self.client),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
        self.senders = []

    def push_message(self, title: str, content: str) -> Dict[str, bool]:
        """向所有渠道发送同一条消息

        Returns:
            {渠道名: 是否成功}
        """
        if self.client is None:
            raise RuntimeError("NotificationManager 需要在 with 语句中使用")

        results = {}
        for sender in self.senders:
            results[sender.name] = sender.send(title, content)
        return results

    @staticmethod
    def format_summary_message(results: List[dict]) -> Tuple[str, str]:
        """格式化签到汇总通知

        Args:
            results: CheckinResult.to_dict() 列表

        Returns:
            (标题, 正文)
        """
        blocks = []
        for result in results:
            status = "✅" if result["success"] else "❌"
            logs = result.get("logs") or ""
            body = logs.replace("\n", "\n  ")
            blocks.append(f"{status} {result['name']}\n  {body}" if body else f"{status} {result['name']}")
        return SUMMARY_TITLE, "\n\n".join(blocks)
