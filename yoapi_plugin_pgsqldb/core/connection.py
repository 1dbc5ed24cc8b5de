"""
数据库连接管理模块
提供基于 asyncpg 的异步PostgreSQL连接池、连接租用与释放功能
连接池延迟创建：构造时不建立任何物理连接
"""

import asyncio
import logging
from typing import Any, AsyncGenerator, Dict, Optional
from contextlib import asynccontextmanager

import asyncpg

from ..config import ConnectionConfig
from ..exceptions.database import DatabaseConnectionError, NotConnectedError

logger = logging.getLogger(__name__)


class AsyncConnectionPool:
    """异步PostgreSQL连接池管理类"""

    def __init__(self, config: ConnectionConfig):
        """
        初始化连接池

        Args:
            config: 已校验的连接配置
        """
        self.config = config
        self._pool: Optional[asyncpg.Pool] = None
        self._init_lock = asyncio.Lock()
        self._is_closed = False

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    @property
    def is_closed(self) -> bool:
        return self._is_closed

    async def _get_pool(self) -> asyncpg.Pool:
        """首次使用时创建驱动连接池"""
        if self._is_closed:
            raise NotConnectedError("Connection pool is closed")

        if self._pool is None:
            async with self._init_lock:
                if self._is_closed:
                    raise NotConnectedError("Connection pool is closed")
                if self._pool is None:
                    try:
                        self._pool = await asyncpg.create_pool(
                            self.config.url,
                            min_size=self.config.pool_min_size,
                            max_size=self.config.pool_max_size,
                            ssl=self.config.ssl_context,
                            timeout=self.config.connect_timeout
                        )
                    except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
                        raise DatabaseConnectionError(
                            f"Failed to create connection pool: {e}", original_error=e
                        ) from e
                    logger.info(
                        f"Connection pool created for {self.config.redacted_url} "
                        f"(size {self.config.pool_min_size}-{self.config.pool_max_size}, "
                        f"ssl={'on' if self.config.ssl_enabled else 'off'})"
                    )
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Any, None]:
        """
        租用一个数据库连接

        连接池满时挂起等待，退出上下文时无论成功或异常都会归还连接

        Yields:
            asyncpg.Connection: 独占的数据库连接

        Raises:
            NotConnectedError: 连接池已关闭
            DatabaseConnectionError: 建立或获取连接失败
        """
        pool = await self._get_pool()
        try:
            connection = await pool.acquire()
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
            raise DatabaseConnectionError(
                f"Failed to acquire database connection: {e}", original_error=e
            ) from e

        logger.debug("Connection leased")
        try:
            yield connection
        finally:
            await pool.release(connection)
            logger.debug("Connection released")

    async def close(self) -> None:
        """等待已租用连接归还后关闭所有连接"""
        if self._is_closed:
            raise NotConnectedError("Connection pool is already closed")
        self._is_closed = True

        async with self._init_lock:
            if self._pool is not None:
                await self._pool.close()
                self._pool = None
        logger.info(f"Connection pool closed for {self.config.redacted_url}")

    async def health_check(self) -> bool:
        """执行健康检查"""
        try:
            async with self.acquire() as conn:
                return await conn.fetchval("SELECT 1") == 1
        except (NotConnectedError, DatabaseConnectionError):
            return False
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning(f"Health check failed: {e}")
            return False

    @property
    def stats(self) -> Dict[str, Any]:
        """获取连接池统计信息"""
        pool = self._pool
        return {
            "min_size": self.config.pool_min_size,
            "max_size": self.config.pool_max_size,
            "size": pool.get_size() if pool else 0,
            "idle": pool.get_idle_size() if pool else 0,
            "is_initialized": pool is not None,
            "is_closed": self._is_closed
        }
