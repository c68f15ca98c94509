#!/usr/bin/env python3
"""
九号出行签到适配器

流程：
1. 查询签到状态（valid）
2. 今日未签到时执行签到（sign）
3. 签到成功后重新查询状态，更新连续签到天数

接口:
- GET  /portal/api/user-sign/v2/status?t=<毫秒时间戳> - 查询签到状态
- POST /portal/api/user-sign/v2/sign - 签到，请求体 {"deviceId": ...}
"""

import time
from typing import Optional, Tuple

from loguru import logger

from platforms.base import BasePlatformAdapter, CheckinLog, CheckinResult, CheckinStatus, LogField
from utils.http import RequestError, RetryingHttpClient


class NineBotAdapter(BasePlatformAdapter):
    """九号出行签到适配器"""

    BASE_URL = "https://cn-cbu-gateway.ninebot.com"
    SIGN_URL = f"{BASE_URL}/portal/api/user-sign/v2/sign"
    STATUS_URL = f"{BASE_URL}/portal/api/user-sign/v2/status"

    USER_AGENT = (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 15_1 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Mobile/15E148 Segway v6 C 609033420"
    )

    def __init__(
        self,
        device_id: str,
        authorization: str,
        account_name: str = "Account 1",
        http: Optional[RetryingHttpClient] = None,
    ):
        """初始化九号出行适配器

        Args:
            device_id: 设备 ID
            authorization: 登录凭证（Authorization 请求头）
            account_name: 账号显示名称
            http: 自定义 HTTP 客户端，默认使用 3 次重试、间隔 2 秒、超时 10 秒

        Raises:
            ValueError: 缺少 device_id 或 authorization
        """
        if not device_id or not authorization:
            raise ValueError("缺少必要的参数: deviceId 或 authorization")

        self.device_id = device_id
        self._account_name = account_name
        self.log = CheckinLog()
        self.http = http or RetryingHttpClient(
            headers=self.build_headers(authorization),
            label=account_name,
        )

    @classmethod
    def build_headers(cls, authorization: str) -> dict:
        """构造模拟 App 内 H5 页面的请求头"""
        return {
            "Accept": "application/json, text/plain, */*",
            "Authorization": authorization,
            "Accept-Encoding": "gzip, deflate",
            "Accept-Language": "zh-CN,zh-Hans;q=0.9",
            "Content-Type": "application/json",
            "Host": "cn-cbu-gateway.ninebot.com",
            "Origin": "https://h5-bj.ninebot.com",
            "from_platform_1": "1",
            "language": "zh",
            "User-Agent": cls.USER_AGENT,
            "Referer": "https://h5-bj.ninebot.com/",
        }

    @property
    def platform_name(self) -> str:
        return "九号出行"

    @property
    def account_name(self) -> str:
        return self._account_name

    @property
    def logs(self) -> str:
        return self.log.render()

    @staticmethod
    def consecutive_days(data: dict) -> int:
        return data.get("consecutiveDays") or 0

    async def valid(self) -> Tuple[Optional[dict], str]:
        """验证登录状态并获取签到信息

        Returns:
            (签到状态, "") 或 (None, 错误信息)
        """
        logger.info(f"[{self.account_name}] 验证登录状态并获取签到信息...")
        timestamp = int(time.time() * 1000)

        try:
            body = await self.http.request("GET", f"{self.STATUS_URL}?t={timestamp}")
            if not isinstance(body, dict):
                raise RequestError(f"响应格式错误: {body!r}")
        except Exception as e:
            error_msg = f"登录验证异常: {e}"
            logger.error(f"[{self.account_name}] {error_msg}")
            return None, error_msg

        if body.get("code") == 0:
            logger.info(f"[{self.account_name}] 验证成功，获取到签到信息")
            return body.get("data") or {}, ""

        error_msg = body.get("msg") or "验证失败"
        logger.error(f"[{self.account_name}] 验证失败: {error_msg}")
        return None, error_msg

    async def sign(self) -> bool:
        """执行签到，失败原因写入签到日志"""
        logger.info(f"[{self.account_name}] 开始签到...")

        try:
            body = await self.http.request("POST", self.SIGN_URL, json={"deviceId": self.device_id})
            if not isinstance(body, dict):
                raise RequestError(f"响应格式错误: {body!r}")
        except Exception as e:
            logger.error(f"[{self.account_name}] 签到错误: {e}")
            self.log.set(LogField.SIGN_RESULT, "签到失败")
            self.log.set(LogField.ERROR_DETAIL, str(e))
            return False

        if body.get("code") == 0:
            logger.success(f"[{self.account_name}] 签到成功")
            return True

        error_msg = body.get("msg") or "未知错误"
        logger.error(f"[{self.account_name}] 签到失败: {error_msg}")
        self.log.set(LogField.SIGN_RESULT, f"签到失败: {error_msg}")
        return False

    async def run(self) -> CheckinResult:
        """运行签到流程"""
        logger.info(f"[{self.account_name}] 开始执行签到任务...")
        try:
            status, reason = await self._run_flow()
        except Exception as e:
            logger.exception(f"[{self.account_name}] 执行异常: {e}")
            self.log.set(LogField.RUN_RESULT, f"执行异常: {e}")
            status, reason = CheckinStatus.FAILED, f"执行异常: {e}"
        finally:
            logger.info(f"[{self.account_name}] 任务执行完成")

        return CheckinResult(
            account=self.account_name,
            status=status,
            logs=self.logs,
            reason=reason,
            platform=self.platform_name,
        )

    async def _run_flow(self) -> Tuple[CheckinStatus, Optional[str]]:
        data, error_msg = await self.valid()
        if data is None:
            self.log.set(LogField.VALID_RESULT, error_msg)
            return CheckinStatus.FAILED, error_msg

        self.log.set(LogField.CONSECUTIVE_DAYS, f"{self.consecutive_days(data)}天")

        if data.get("currentSignStatus") == 1:
            self.log.set(LogField.TODAY_STATUS, "已签到🎉")
            logger.info(f"[{self.account_name}] 今日已签到，无需重复签到")
            return CheckinStatus.ALREADY_DONE, None

        self.log.set(LogField.TODAY_STATUS, "未签到❌")

        if not await self.sign():
            return CheckinStatus.FAILED, self.log.get(LogField.SIGN_RESULT)

        logger.info(f"[{self.account_name}] 签到成功，获取最新签到数据...")
        new_data, _ = await self.valid()
        if new_data is None:
            self.log.set(LogField.SIGN_RESULT, "签到成功，但获取最新状态失败")
            return CheckinStatus.SUCCESS, None

        self.log.set(LogField.CONSECUTIVE_DAYS, f"{self.consecutive_days(new_data)}天")
        self.log.set(LogField.TODAY_STATUS, "已签到🎉")
        self.log.set(LogField.SIGN_RESULT, "签到成功🎉🎉")
        return CheckinStatus.SUCCESS, None
