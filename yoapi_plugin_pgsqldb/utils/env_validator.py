"""插件环境变量读取与校验"""

import os
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from ..exceptions.database import ConfigurationError


class EnvVarType(Enum):
    """环境变量类型枚举"""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off')


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"cannot convert '{value}' to boolean")


_CONVERTERS: Dict[EnvVarType, Callable[[Any], Any]] = {
    EnvVarType.STRING: str,
    EnvVarType.INTEGER: int,
    EnvVarType.FLOAT: float,
    EnvVarType.BOOLEAN: _to_bool,
}


class EnvValidator:
    """
    根据模式定义读取环境变量

    模式中每一项支持: type, required, default, min, max, enum, description
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def validate_env_vars(self, plugin_name: str, env_schema: Dict[str, dict]) -> Dict[str, Any]:
        """
        读取并校验插件的环境变量

        Args:
            plugin_name: 插件名称，仅用于错误信息
            env_schema: 环境变量模式定义

        Returns:
            Dict[str, Any]: 转换后的变量值，未设置且无默认值的可选变量不出现在结果中

        Raises:
            ConfigurationError: 必需变量缺失或值无效
        """
        validated: Dict[str, Any] = {}

        for var_name, var_config in env_schema.items():
            raw = self.environ.get(var_name)
            if raw is None or raw == "":
                if 'default' in var_config:
                    raw = var_config['default']
                elif var_config.get('required', False):
                    raise ConfigurationError(
                        f"[{plugin_name}] required environment variable {var_name} is not set"
                    )
                else:
                    continue

            try:
                validated[var_name] = self._convert(raw, var_config)
            except ValueError as e:
                raise ConfigurationError(
                    f"[{plugin_name}] invalid value for {var_name}: {e}", original_error=e
                ) from e

        return validated

    @staticmethod
    def _convert(raw: Any, var_config: dict) -> Any:
        var_type = var_config.get('type', EnvVarType.STRING)
        value = _CONVERTERS[var_type](raw)

        if 'enum' in var_config and value not in var_config['enum']:
            raise ValueError(f"'{value}' is not one of {var_config['enum']}")

        if var_type in (EnvVarType.INTEGER, EnvVarType.FLOAT):
            if var_config.get('min') is not None and value < var_config['min']:
                raise ValueError(f"must be >= {var_config['min']}")
            if var_config.get('max') is not None and value > var_config['max']:
                raise ValueError(f"must be <= {var_config['max']}")

        return value


_env_validator = EnvValidator()


def get_env_validator() -> EnvValidator:
    """获取环境变量校验器实例"""
    return _env_validator
