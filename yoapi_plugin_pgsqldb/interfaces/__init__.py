"""
接口模块初始化文件
导出连接器和全局实例管理函数
"""

from .internal_api import (
    Closed,
    HostContext,
    Open,
    PgsqlConnector,
    get_internal_api,
    init_internal_api,
    reset_internal_api
)

__all__ = [
    'Closed',
    'HostContext',
    'Open',
    'PgsqlConnector',
    'get_internal_api',
    'init_internal_api',
    'reset_internal_api'
]
