#!/usr/bin/env python3
"""
九号出行自动签到脚本

用于 GitHub Actions / 定时任务中每日执行一次签到并推送结果。
无论签到或推送是否失败，进程都以 0 退出。
"""

import asyncio

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from platforms.manager import PlatformManager
from utils.config import AppConfig, ConfigError
from utils.logging import setup_logging


async def main() -> None:
    """主函数"""
    load_dotenv(find_dotenv(usecwd=True))
    config = AppConfig.load_from_env()
    setup_logging(debug=config.debug, log_file=config.log_file)

    logger.info("=" * 50)
    logger.info("九号出行签到脚本启动")
    logger.info("=" * 50)

    manager = PlatformManager(config)
    try:
        await manager.run_all()
    except ConfigError as e:
        logger.error(str(e))
        return

    logger.info("-" * 40)
    logger.info(
        f"签到完成: 共 {manager.total_count} 个账号，"
        f"成功 {manager.success_count} 个，失败 {manager.failed_count} 个"
    )

    # 推送使用同步 httpx.Client，此时签到已全部结束，阻塞事件循环无影响
    manager.send_summary_notification()

    logger.info("=" * 50)
    logger.info("九号出行签到脚本完成")
    logger.info("=" * 50)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
