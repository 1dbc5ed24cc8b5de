"""
会话与事务作用域模块
将调用方的工作单元固定在单个租用连接上执行，并保证连接在所有退出路径上归还
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, TypeVar, Union

from ..core.connection import AsyncConnectionPool
from ..exceptions.database import TransactionAbortError
from .executor import BoundQuery, run_command

logger = logging.getLogger(__name__)
T = TypeVar('T')

UnitOfWork = Callable[[BoundQuery], Union[T, Awaitable[T]]]


async def _invoke(unit_of_work: UnitOfWork, query: BoundQuery) -> Any:
    result = unit_of_work(query)
    if inspect.isawaitable(result):
        result = await result
    return result


class SessionScope:
    """会话作用域：多条语句共用一个连接，不带事务语义"""

    def __init__(self, pool: AsyncConnectionPool):
        self._pool = pool

    async def run(self, unit_of_work: UnitOfWork) -> Any:
        """
        租用一个连接并在其上执行工作单元

        Args:
            unit_of_work: 接收查询句柄的函数，可以是协程函数

        Returns:
            Any: 工作单元的返回值，在连接归还后返回
        """
        async with self._pool.acquire() as connection:
            query = BoundQuery(connection)
            try:
                return await _invoke(unit_of_work, query)
            finally:
                query.revoke()


class TransactionScope:
    """
    事务作用域

    LEASE -> BEGIN -> RUNNING -> COMMIT -> RELEASED
                              -> ROLLBACK -> RELEASED -> 重新抛出异常
    """

    def __init__(self, pool: AsyncConnectionPool):
        self._pool = pool

    async def run(self, unit_of_work: UnitOfWork) -> Any:
        """
        在事务中执行工作单元

        Args:
            unit_of_work: 接收查询句柄的函数，可以是协程函数

        Returns:
            Any: 工作单元的返回值，在提交并归还连接后返回

        Raises:
            Exception: 工作单元或 BEGIN/COMMIT 的原始异常，回滚成功后原样抛出
            TransactionAbortError: 回滚本身失败
        """
        async with self._pool.acquire() as connection:
            query = BoundQuery(connection)
            try:
                await run_command(connection, "BEGIN")
                result = await _invoke(unit_of_work, query)
                await run_command(connection, "COMMIT")
                return result
            except Exception as exc:
                logger.warning(f"Rolling back transaction after error: {exc!r}")
                try:
                    await run_command(connection, "ROLLBACK")
                except Exception as rollback_error:
                    logger.error(f"Rollback failed: {rollback_error!r} (original error: {exc!r})")
                    raise TransactionAbortError(
                        f"Transaction rollback failed after error: {exc}",
                        original_error=exc,
                        rollback_error=rollback_error
                    ) from exc
                raise
            finally:
                query.revoke()
