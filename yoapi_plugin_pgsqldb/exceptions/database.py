"""数据库异常模块"""

from typing import Optional


class DatabaseError(Exception):
    """数据库基础异常类"""

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class ConfigurationError(DatabaseError):
    """连接配置错误（URL、SSL、连接池参数或环境变量无效）"""
    pass


class NotConnectedError(DatabaseError):
    """连接器已关闭、尚未初始化，或查询句柄已失效"""
    pass


class DatabaseConnectionError(DatabaseError):
    """数据库连接错误"""
    pass


class QueryError(DatabaseError):
    """
    查询执行错误

    保留后端返回的 SQLSTATE、详细信息和约束名称
    """

    def __init__(self,
                 message: str,
                 original_error: Optional[BaseException] = None,
                 sqlstate: Optional[str] = None,
                 detail: Optional[str] = None,
                 constraint: Optional[str] = None):
        self.sqlstate = sqlstate
        self.detail = detail
        self.constraint = constraint
        super().__init__(message, original_error)


class TransactionAbortError(DatabaseError):
    """事务中发生错误且回滚本身也失败"""

    def __init__(self,
                 message: str,
                 original_error: BaseException,
                 rollback_error: BaseException):
        self.rollback_error = rollback_error
        super().__init__(message, original_error)
