"""
yoapi-plugin-pgsqldb - PostgreSQL 数据库插件
提供连接池化的SQL执行、会话和事务管理功能
"""

import os
import logging
from typing import Annotated, Optional

from dotenv import load_dotenv
from fastapi import Depends

from .config.settings import ConnectionConfig, DatabaseConfigManager
from .interfaces.internal_api import PgsqlConnector, init_internal_api, reset_internal_api
from .services.executor import BoundQuery, FieldDescriptor, QueryResult
from .exceptions.database import (
    DatabaseError,
    ConfigurationError,
    NotConnectedError,
    DatabaseConnectionError,
    QueryError,
    TransactionAbortError
)

logger = logging.getLogger(__name__)

# 加载环境变量
env_path = os.path.join(os.path.dirname(__file__), '.env')
if os.path.exists(env_path):
    load_dotenv(env_path)

# 全局数据库API实例
_db_api: Optional[PgsqlConnector] = None


async def get_database_api() -> PgsqlConnector:
    """
    获取数据库API实例依赖项

    Returns:
        PgsqlConnector: 数据库连接器

    Raises:
        NotConnectedError: 插件未注册或已关闭
    """
    if _db_api is None or _db_api.is_closed:
        raise NotConnectedError("数据库API未初始化")
    return _db_api


DatabaseAPI = Annotated[PgsqlConnector, Depends(get_database_api)]


def register(app, **dependencies):
    """
    插件注册函数
    从环境变量读取配置并创建连接器，连接在首次使用时建立
    """
    global _db_api

    try:
        config_manager = DatabaseConfigManager()
        config = config_manager.get_default_config()
        _db_api = init_internal_api(config, app=app, connector_id="pgsqldb")
    except ConfigurationError as e:
        logger.error(f"PostgreSQL数据库插件注册失败: {e}")
        raise

    logger.info("PostgreSQL数据库插件已成功注册")

    dependencies['db_api'] = _db_api
    dependencies['db_config_manager'] = config_manager
    return _db_api


async def shutdown():
    """插件关闭时的清理操作"""
    global _db_api
    if _db_api is not None and not _db_api.is_closed:
        await _db_api.close()
        logger.info("PostgreSQL数据库插件已关闭，连接池已清理")
    _db_api = None
    reset_internal_api()


__all__ = [
    'register',
    'shutdown',
    'get_database_api',
    'DatabaseAPI',
    'PgsqlConnector',
    'ConnectionConfig',
    'DatabaseConfigManager',
    'BoundQuery',
    'FieldDescriptor',
    'QueryResult',
    'DatabaseError',
    'ConfigurationError',
    'NotConnectedError',
    'DatabaseConnectionError',
    'QueryError',
    'TransactionAbortError'
]
