"""
语句执行模块
在连接池或指定连接上执行单条SQL语句，并将结果整理为统一结构
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

from ..core.connection import AsyncConnectionPool
from ..exceptions.database import NotConnectedError, QueryError
from ..utils.placeholders import rewrite_placeholders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """结果列描述"""
    name: str
    type_oid: int
    type_name: str


@dataclass
class QueryResult:
    """查询结果：列描述、行数据和影响行数"""
    fields: List[FieldDescriptor] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": [
                {"name": f.name, "type_oid": f.type_oid, "type_name": f.type_name}
                for f in self.fields
            ],
            "rows": self.rows,
            "rowCount": self.row_count
        }


def parse_row_count(status: Optional[str]) -> Optional[int]:
    """从命令标签中解析行数，例如 'INSERT 0 1' -> 1，'CREATE TABLE' -> None"""
    if not status:
        return None
    last = status.rsplit(" ", 1)[-1]
    return int(last) if last.isdigit() else None


def _query_error(error: Exception) -> QueryError:
    logger.warning(f"Statement failed: {error}")
    return QueryError(
        f"Failed to execute query: {error}",
        original_error=error,
        sqlstate=getattr(error, 'sqlstate', None),
        detail=getattr(error, 'detail', None),
        constraint=getattr(error, 'constraint_name', None)
    )


async def run_command(connection: Any, command: str) -> str:
    """执行无参数的控制语句（BEGIN/COMMIT/ROLLBACK），返回命令标签"""
    logger.debug(f"Executing command: {command}")
    try:
        return await connection.execute(command)
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        raise _query_error(e) from e


async def run_statement(connection: Any,
                        sql: str,
                        params: Optional[Sequence[Any]] = None) -> QueryResult:
    """
    在指定连接上执行一条SQL语句

    Args:
        connection: 已租用的 asyncpg 连接
        sql: SQL语句，可使用 `?` 或 `$N` 占位符
        params: 位置参数，按顺序绑定

    Returns:
        QueryResult: 完整物化的查询结果

    Raises:
        QueryError: 后端拒绝执行该语句
    """
    args: List[Any] = []
    if params is not None:
        args = list(params)
        sql = rewrite_placeholders(sql, len(args))

    logger.debug(f"Executing statement with {len(args)} parameter(s): {sql}")
    try:
        statement = await connection.prepare(sql)
        records = await statement.fetch(*args)
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        raise _query_error(e) from e

    fields = [
        FieldDescriptor(name=attr.name, type_oid=attr.type.oid, type_name=attr.type.name)
        for attr in statement.get_attributes()
    ]
    return QueryResult(
        fields=fields,
        rows=[dict(record) for record in records],
        row_count=parse_row_count(statement.get_statusmsg())
    )


class BoundQuery:
    """
    绑定到单个租用连接的查询句柄

    作用域结束后被吊销，之后的调用抛出 NotConnectedError
    """

    def __init__(self, connection: Any):
        self._connection = connection

    @property
    def is_active(self) -> bool:
        return self._connection is not None

    async def __call__(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        if self._connection is None:
            raise NotConnectedError("Query handle used after its connection was released")
        return await run_statement(self._connection, sql, params)

    def revoke(self) -> None:
        self._connection = None


class StatementExecutor:
    """单语句执行器，每次调用从连接池租用一个连接"""

    def __init__(self, pool: AsyncConnectionPool):
        self._pool = pool

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        async with self._pool.acquire() as connection:
            return await run_statement(connection, sql, params)
