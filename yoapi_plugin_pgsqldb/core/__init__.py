"""
核心模块 - 数据库连接池
提供异步PostgreSQL连接池管理、连接租用与释放功能
"""

from .connection import AsyncConnectionPool

__all__ = ['AsyncConnectionPool']
