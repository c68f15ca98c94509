#!/usr/bin/env python3
"""
日志配置模块

统一日志格式，并对 Authorization、设备 ID、推送密钥等敏感信息脱敏。
"""

import re
import sys
from typing import Optional

from loguru import logger


# 敏感信息模式
SENSITIVE_PATTERNS = [
    # Authorization 头
    (r'(Authorization["\']?\s*[:=]\s*["\']?)([^"\'\s,}]+)', r'\1***MASKED***'),
    # Bearer token
    (r'(Bearer\s+)([A-Za-z0-9._-]+)', r'\1***MASKED***'),
    # 设备 ID
    (r'(device_?id["\']?\s*[:=]\s*["\']?)([^"\'\s,}]+)', r'\1***MASKED***'),
    # 推送渠道的 key / token / user
    (r'(push_?key["\']?\s*[:=]\s*["\']?)([^"\'\s,}&]+)', r'\1***MASKED***'),
    (r'(token["\']?\s*[:=]\s*["\']?)([^"\'\s,}&]+)', r'\1***MASKED***'),
    (r'(user["\']?\s*[:=]\s*["\']?)([^"\'\s,}&]{20,})', r'\1***MASKED***'),
    (r'(\bkey["\']?\s*[:=]\s*["\']?)([^"\'\s,}&]+)', r'\1***MASKED***'),
]


def mask_sensitive_data(message: str) -> str:
    """脱敏敏感信息

    Args:
        message: 原始消息

    Returns:
        脱敏后的消息
    """
    result = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE)
    return result


class SensitiveFilter:
    """敏感信息过滤器"""

    def __call__(self, record):
        record["message"] = mask_sensitive_data(record["message"])
        return True


def setup_logging(
    debug: bool = False,
    mask_sensitive: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """配置日志

    Args:
        debug: 是否启用调试模式
        mask_sensitive: 是否脱敏敏感信息
        log_file: 日志文件路径（可选）
    """
    logger.remove()

    level = "DEBUG" if debug else "INFO"

    format_str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    # 非调试模式只输出时间、级别和消息
    simple_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>"
    )

    filter_func = SensitiveFilter() if mask_sensitive else None

    logger.add(
        sys.stderr,
        format=format_str if debug else simple_format,
        level=level,
        colorize=True,
        filter=filter_func,
    )

    if log_file:
        logger.add(
            log_file,
            format=format_str,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            filter=filter_func,
        )
