#!/usr/bin/env python3
"""
平台适配器基础类型

签到状态、按固定字段排序的签到日志，以及单个账号的签到结果。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class CheckinStatus(Enum):
    """签到结果状态"""

    SUCCESS = "success"
    ALREADY_DONE = "already_done"
    FAILED = "failed"


class LogField(str, Enum):
    """签到日志字段，值为通知中显示的名称"""

    CONSECUTIVE_DAYS = "连续签到天数"
    TODAY_STATUS = "今日签到状态"
    SIGN_RESULT = "签到结果"
    ERROR_DETAIL = "错误详情"
    VALID_RESULT = "验证结果"
    RUN_RESULT = "执行结果"


class CheckinLog:
    """有序签到日志

    同一字段再次写入时原位替换，保持首次写入的顺序。
    """

    def __init__(self):
        self._entries: Dict[LogField, str] = {}

    def set(self, field: LogField, value: str) -> None:
        self._entries[field] = value

    def get(self, field: LogField) -> Optional[str]:
        return self._entries.get(field)

    def render(self) -> str:
        return "\n".join(f"{field.value}: {value}" for field, value in self._entries.items())

    def __str__(self) -> str:
        return self.render()


@dataclass
class CheckinResult:
    """单个账号的签到结果"""

    account: str
    status: CheckinStatus
    logs: str = ""
    reason: Optional[str] = None
    platform: str = "九号出行"

    @property
    def is_success(self) -> bool:
        return self.status in (CheckinStatus.SUCCESS, CheckinStatus.ALREADY_DONE)

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "name": self.account,
            "status": self.status.value,
            "success": self.is_success,
            "logs": self.logs,
            "reason": self.reason,
        }


class BasePlatformAdapter(ABC):
    """平台适配器基类"""

    @property
    @abstractmethod
    def platform_name(self) -> str:
        ...

    @property
    @abstractmethod
    def account_name(self) -> str:
        ...

    @abstractmethod
    async def run(self) -> CheckinResult:
        """执行完整签到流程，不向调用方抛出异常"""
