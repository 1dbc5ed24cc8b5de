"""
内部公共API接口模块
提供插件内部使用的非HTTP公共接口：单语句查询、会话、事务与生命周期管理
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ..config.settings import ConnectionConfig
from ..core.connection import AsyncConnectionPool
from ..services.executor import QueryResult, StatementExecutor
from ..services.scope import SessionScope, TransactionScope, UnitOfWork
from ..exceptions.database import NotConnectedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostContext:
    """宿主框架上下文，对连接器而言是不透明的"""
    app: Any
    connector_id: str


@dataclass(frozen=True)
class Open:
    """连接器已打开，持有连接池及其上的执行组件"""
    pool: AsyncConnectionPool
    executor: StatementExecutor
    sessions: SessionScope
    transactions: TransactionScope


@dataclass(frozen=True)
class Closed:
    """连接器已关闭"""


ConnectorState = Union[Open, Closed]


class PgsqlConnector:
    """
    PostgreSQL 连接器
    对外提供 query / sequence / transaction / close 接口
    """

    def __init__(self,
                 app: Any = None,
                 options: Union[ConnectionConfig, Mapping[str, Any], None] = None,
                 connector_id: Optional[str] = None):
        """
        创建连接器，配置无效时立即失败且不分配连接池

        Args:
            app: 宿主应用对象，仅保存不解释
            options: ConnectionConfig 或选项字典 {url, ssl, pool_min_size, pool_max_size, connect_timeout}
            connector_id: 连接器标识，默认自动生成

        Raises:
            ConfigurationError: 配置无效
        """
        if isinstance(options, ConnectionConfig):
            config = options
        else:
            config = ConnectionConfig.from_options(options or {})

        self.config = config
        self.host = HostContext(app=app, connector_id=connector_id or uuid.uuid4().hex)

        pool = AsyncConnectionPool(config)
        self._state: ConnectorState = Open(
            pool=pool,
            executor=StatementExecutor(pool),
            sessions=SessionScope(pool),
            transactions=TransactionScope(pool)
        )
        logger.info(f"PostgreSQL connector '{self.host.connector_id}' configured for {config.redacted_url}")

    @property
    def connector_id(self) -> str:
        return self.host.connector_id

    @property
    def is_closed(self) -> bool:
        return isinstance(self._state, Closed)

    def _require_open(self) -> Open:
        state = self._state
        if not isinstance(state, Open):
            raise NotConnectedError(f"Connector '{self.host.connector_id}' is closed")
        return state

    # ========== 查询接口 ==========

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """
        执行单条SQL语句，连接从连接池临时租用

        Args:
            sql: SQL语句，支持 `?` 占位符
            params: 位置参数列表

        Returns:
            QueryResult: 查询结果

        Raises:
            NotConnectedError: 连接器已关闭
            QueryError: 后端拒绝执行
        """
        return await self._require_open().executor.execute(sql, params)

    async def sequence(self, unit_of_work: UnitOfWork) -> Any:
        """
        在同一个连接上执行多条语句（无事务）

        Args:
            unit_of_work: 接收查询句柄 query(sql, params) 的函数

        Returns:
            Any: 工作单元的返回值
        """
        return await self._require_open().sessions.run(unit_of_work)

    async def transaction(self, unit_of_work: UnitOfWork) -> Any:
        """
        在事务中执行工作单元，成功提交，失败回滚后重新抛出

        Args:
            unit_of_work: 接收查询句柄 query(sql, params) 的函数

        Returns:
            Any: 工作单元的返回值
        """
        return await self._require_open().transactions.run(unit_of_work)

    # ========== 生命周期与监控 ==========

    async def close(self) -> None:
        """
        关闭连接池中的所有连接

        只能调用一次，再次调用抛出 NotConnectedError
        """
        state = self._require_open()
        await state.pool.close()
        self._state = Closed()
        logger.info(f"PostgreSQL connector '{self.host.connector_id}' closed")

    async def health_check(self) -> bool:
        """执行健康检查"""
        return await self._require_open().pool.health_check()

    @property
    def stats(self) -> Dict[str, Any]:
        """获取连接池统计信息"""
        return self._require_open().pool.stats

    async def __aenter__(self) -> 'PgsqlConnector':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self.is_closed:
            await self.close()


# 全局连接器实例
_internal_api: Optional[PgsqlConnector] = None


def get_internal_api() -> PgsqlConnector:
    """
    获取全局连接器实例

    Raises:
        NotConnectedError: 连接器未初始化
    """
    if _internal_api is None:
        raise NotConnectedError("数据库内部API未初始化")
    return _internal_api


def init_internal_api(config: Union[ConnectionConfig, Mapping[str, Any]],
                      app: Any = None,
                      connector_id: Optional[str] = None) -> PgsqlConnector:
    """初始化全局连接器实例"""
    global _internal_api
    _internal_api = PgsqlConnector(app, config, connector_id)
    return _internal_api


def reset_internal_api() -> None:
    """清除全局连接器实例（不关闭连接池）"""
    global _internal_api
    _internal_api = None
