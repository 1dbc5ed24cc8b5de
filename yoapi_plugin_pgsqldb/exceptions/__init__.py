"""异常模块初始化文件"""

from .database import (
    DatabaseError,
    ConfigurationError,
    NotConnectedError,
    DatabaseConnectionError,
    QueryError,
    TransactionAbortError
)

__all__ = [
    'DatabaseError',
    'ConfigurationError',
    'NotConnectedError',
    'DatabaseConnectionError',
    'QueryError',
    'TransactionAbortError'
]
