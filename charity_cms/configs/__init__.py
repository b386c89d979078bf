from charity_cms.configs.logger import file_logger
from charity_cms.configs.settings import LimiterConfig, Settings, settings

__all__ = [
    "LimiterConfig",
    "Settings",
    "file_logger",
    "settings",
]
