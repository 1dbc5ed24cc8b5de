"""
服务模块 - 语句执行与连接作用域
提供单语句执行、会话作用域和事务作用域
"""

from .executor import (
    BoundQuery,
    FieldDescriptor,
    QueryResult,
    StatementExecutor,
    run_command,
    run_statement
)
from .scope import SessionScope, TransactionScope

__all__ = [
    'BoundQuery',
    'FieldDescriptor',
    'QueryResult',
    'StatementExecutor',
    'run_command',
    'run_statement',
    'SessionScope',
    'TransactionScope'
]
