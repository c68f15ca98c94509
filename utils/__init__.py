# Shared utilities for the Ninebot check-in runner
# This module contains configuration, notification, retry, HTTP and logging utilities

from .retry import (
    retry_decorator,
)

from .http import (
    RequestError,
    RetryingHttpClient,
)

from .config import (
    AppConfig,
    ConfigError,
    NineBotAccount,
    NotifyConfig,
    BarkConfig,
    ServerChanConfig,
    PushoverConfig,
    PushDeerConfig,
)

from .notify import (
    NotificationManager,
    NotificationSender,
    BarkSender,
    ServerChanSender,
    PushoverSender,
    PushDeerSender,
)

from .logging import (
    setup_logging,
    mask_sensitive_data,
    SensitiveFilter,
)

__all__ = [
    # Config
    "AppConfig",
    "ConfigError",
    "NineBotAccount",
    "NotifyConfig",
    "BarkConfig",
    "ServerChanConfig",
    "PushoverConfig",
    "PushDeerConfig",
    # HTTP
    "RequestError",
    "RetryingHttpClient",
    # Notification
    "NotificationManager",
    "NotificationSender",
    "BarkSender",
    "ServerChanSender",
    "PushoverSender",
    "PushDeerSender",
    # Retry utilities
    "retry_decorator",
    # Logging
    "setup_logging",
    "mask_sensitive_data",
    "SensitiveFilter",
]
