#!/usr/bin/env python3
"""
平台管理器

依次执行所有账号的签到，汇总结果并发送通知。
"""

from typing import Callable, Dict, Optional

import httpx
from loguru import logger

from platforms.base import BasePlatformAdapter, CheckinResult, CheckinStatus
from platforms.ninebot import NineBotAdapter
from utils.config import AppConfig, ConfigError
from utils.notify import NotificationManager

AdapterFactory = Callable[..., BasePlatformAdapter]


class PlatformManager:
    """平台管理器

    账号之间严格串行执行，单个账号的异常只会转为该账号的失败结果。
    """

    def __init__(self, config: AppConfig, adapter_factory: AdapterFactory = NineBotAdapter):
        """初始化平台管理器

        Args:
            config: 应用配置
            adapter_factory: 适配器构造函数，参数为 (device_id, authorization, account_name)
        """
        self.config = config
        self.adapter_factory = adapter_factory
        self.results: list[CheckinResult] = []

    async def run_all(self) -> list[CheckinResult]:
        """运行所有账号签到

        Raises:
            ConfigError: 未配置任何账号
        """
        if not self.config.has_any_config():
            raise ConfigError("未配置任何账号信息，请设置 NINEBOT_ACCOUNTS 或 NINEBOT_DEVICE_ID/NINEBOT_AUTHORIZATION")

        self.results = []
        total = len(self.config.accounts)

        for i, account in enumerate(self.config.accounts):
            name = account.get_display_name(i)
            logger.info("-" * 40)
            logger.info(f"处理账号 [{i + 1}/{total}]: {name}")
            self.results.append(await self._run_account(account.device_id, account.authorization, name))

        return self.results

    async def _run_account(self, device_id: str, authorization: str, name: str) -> CheckinResult:
        try:
            adapter = self.adapter_factory(
                device_id=device_id,
                authorization=authorization,
                account_name=name,
            )
        except Exception as e:
            logger.error(f"[{name}] 初始化失败: {e}")
            return CheckinResult(
                account=name,
                status=CheckinStatus.FAILED,
                logs=f"初始化失败: {e}",
                reason=str(e),
            )

        try:
            return await adapter.run()
        except Exception as e:
            logger.exception(f"[{name}] 执行异常: {e}")
            return CheckinResult(
                account=name,
                status=CheckinStatus.FAILED,
                logs=f"执行异常: {e}",
                reason=str(e),
            )

    def send_summary_notification(
        self,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> Dict[str, bool]:
        """发送签到汇总通知

        Args:
            transport: 自定义传输层（测试时注入）

        Returns:
            {渠道名: 是否成功}，没有签到结果时为空
        """
        if not self.results:
            logger.info("没有签到结果，跳过通知")
            return {}

        title, content = NotificationManager.format_summary_message([r.to_dict() for r in self.results])
        logger.info(f"{title}:\n{content}")

        with NotificationManager(self.config.notify, transport=transport) as notify:
            return notify.push_message(title, content)

    @property
    def success_count(self) -> int:
        """成功数量（含今日已签到）"""
        return sum(1 for r in self.results if r.is_success)

    @property
    def failed_count(self) -> int:
        """失败数量"""
        return sum(1 for r in self.results if r.status == CheckinStatus.FAILED)

    @property
    def total_count(self) -> int:
        """总数量"""
        return len(self.results)
