#!/usr/bin/env python3
"""
配置管理模块

启动时从环境变量一次性组装 AppConfig，之后显式传递给管理器和通知模块。

支持两种账号配置：
1. JSON 数组格式 (NINEBOT_ACCOUNTS): 多账号
2. 单独环境变量格式 (NINEBOT_DEVICE_ID / NINEBOT_AUTHORIZATION / NINEBOT_NAME): 单账号
"""

import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

FALSY_VALUES = ["false", "0", "off", "no"]


class ConfigError(Exception):
    """配置缺失或无效"""


def default_account_name(index: int) -> str:
    return f"Account {index + 1}"


@dataclass
class NineBotAccount:
    """九号出行账号配置"""

    device_id: str
    authorization: str
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict, index: int) -> "NineBotAccount":
        """从字典创建 NineBotAccount"""
        name = data.get("name") or default_account_name(index)
        return cls(
            device_id=data["deviceId"],
            authorization=data["authorization"],
            name=name,
        )

    def get_display_name(self, index: int) -> str:
        return self.name if self.name else default_account_name(index)


@dataclass
class BarkConfig:
    """Bark 推送配置"""

    key: Optional[str] = None
    server: str = "https://api.day.app"
    group: Optional[str] = None
    icon: Optional[str] = None
    sound: Optional[str] = None
    url_jump: Optional[str] = None
    copy: Optional[str] = None
    auto_copy: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.key)

    @classmethod
    def from_env(cls) -> "BarkConfig":
        return cls(
            key=os.getenv("BARK_KEY") or None,
            server=(os.getenv("BARK_URL") or cls.server).rstrip("/"),
            group=os.getenv("BARK_GROUP") or None,
            icon=os.getenv("BARK_ICON") or None,
            sound=os.getenv("BARK_SOUND") or None,
            url_jump=os.getenv("BARK_URL_JUMP") or None,
            copy=os.getenv("BARK_COPY") or None,
            auto_copy=os.getenv("BARK_AUTO_COPY") == "1",
        )


@dataclass
class ServerChanConfig:
    """Server酱推送配置"""

    key: Optional[str] = None
    server: str = "https://sctapi.ftqq.com"

    @property
    def is_configured(self) -> bool:
        return bool(self.key)

    @classmethod
    def from_env(cls) -> "ServerChanConfig":
        return cls(
            key=os.getenv("SERVERCHAN_KEY") or None,
            server=(os.getenv("SERVERCHAN_URL") or cls.server).rstrip("/"),
        )


@dataclass
class PushoverConfig:
    """Pushover 推送配置"""

    token: Optional[str] = None
    user: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.user)

    @classmethod
    def from_env(cls) -> "PushoverConfig":
        return cls(
            token=os.getenv("PUSHOVER_TOKEN") or None,
            user=os.getenv("PUSHOVER_USER") or None,
        )


@dataclass
class PushDeerConfig:
    """PushDeer 推送配置"""

    key: Optional[str] = None
    server: str = "https://api2.pushdeer.com"
    msg_type: str = "markdown"

    @property
    def is_configured(self) -> bool:
        return bool(self.key)

    @classmethod
    def from_env(cls) -> "PushDeerConfig":
        return cls(
            key=os.getenv("PUSHDEER_KEY") or None,
            server=(os.getenv("PUSHDEER_URL") or cls.server).rstrip("/"),
            msg_type=os.getenv("PUSHDEER_TYPE") or cls.msg_type,
        )


@dataclass
class NotifyConfig:
    """所有推送渠道的配置"""

    bark: BarkConfig = field(default_factory=BarkConfig)
    serverchan: ServerChanConfig = field(default_factory=ServerChanConfig)
    pushover: PushoverConfig = field(default_factory=PushoverConfig)
    pushdeer: PushDeerConfig = field(default_factory=PushDeerConfig)

    @classmethod
    def from_env(cls) -> "NotifyConfig":
        return cls(
            bark=BarkConfig.from_env(),
            serverchan=ServerChanConfig.from_env(),
            pushover=PushoverConfig.from_env(),
            pushdeer=PushDeerConfig.from_env(),
        )


@dataclass
class AppConfig:
    """应用配置"""

    accounts: List[NineBotAccount] = field(default_factory=list)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    debug: bool = False
    log_file: Optional[str] = None

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """从环境变量加载完整配置"""
        debug_str = os.getenv("DEBUG_MODE", "false").lower()
        return cls(
            accounts=cls._load_accounts(),
            notify=NotifyConfig.from_env(),
            debug=debug_str not in FALSY_VALUES,
            log_file=os.getenv("LOG_FILE") or None,
        )

    @classmethod
    def _load_accounts(cls) -> List[NineBotAccount]:
        """从环境变量加载九号出行账号配置

        NINEBOT_ACCOUNTS 存在时只使用 JSON 格式，解析失败不回退到单账号变量。
        """
        accounts_str = os.getenv("NINEBOT_ACCOUNTS")
        if accounts_str:
            return cls._parse_accounts_json(accounts_str)

        device_id = os.getenv("NINEBOT_DEVICE_ID")
        authorization = os.getenv("NINEBOT_AUTHORIZATION")

        if device_id and authorization:
            logger.info("成功加载 1 个九号出行账号配置 (环境变量格式)")
            return [NineBotAccount(
                device_id=device_id,
                authorization=authorization,
                name=os.getenv("NINEBOT_NAME") or default_account_name(0),
            )]

        if device_id or authorization:
            logger.warning("九号出行配置不完整: 需要同时提供 NINEBOT_DEVICE_ID 和 NINEBOT_AUTHORIZATION")
        return []

    @staticmethod
    def _parse_accounts_json(accounts_str: str) -> List[NineBotAccount]:
        try:
            accounts_data = json.loads(accounts_str)
        except json.JSONDecodeError as e:
            logger.error(f"NINEBOT_ACCOUNTS JSON 解析失败: {e}")
            return []

        if not isinstance(accounts_data, list):
            logger.error("NINEBOT_ACCOUNTS 配置格式错误: 必须是 JSON 数组格式")
            return []

        accounts = []
        for i, account_dict in enumerate(accounts_data):
            if not isinstance(account_dict, dict):
                logger.error(f"账号 {i + 1} 配置格式错误: 必须是 JSON 对象")
                continue

            if "deviceId" not in account_dict or "authorization" not in account_dict:
                logger.error(f"账号 {i + 1} 缺少必填字段: 需要 'deviceId' 和 'authorization'")
                continue

            accounts.append(NineBotAccount.from_dict(account_dict, i))

        if accounts:
            logger.info(f"成功加载 {len(accounts)} 个九号出行账号配置 (JSON 格式)")
        return accounts

    def has_any_config(self) -> bool:
        return len(self.accounts) > 0
