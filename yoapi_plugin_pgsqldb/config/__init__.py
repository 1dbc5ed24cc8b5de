"""配置模块初始化文件"""

from .settings import (
    ConnectionConfig,
    DatabaseConfigManager,
    redact_url,
    resolve_ssl,
    validate_url
)

__all__ = [
    'ConnectionConfig',
    'DatabaseConfigManager',
    'redact_url',
    'resolve_ssl',
    'validate_url'
]
