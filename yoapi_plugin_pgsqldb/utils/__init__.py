"""工具模块初始化文件"""

from .env_validator import EnvValidator, EnvVarType, get_env_validator
from .placeholders import rewrite_placeholders

__all__ = [
    'EnvValidator',
    'EnvVarType',
    'get_env_validator',
    'rewrite_placeholders'
]
