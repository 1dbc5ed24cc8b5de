"""
SQL 占位符改写

将 `?` 风格的参数占位符改写为 PostgreSQL 的位置参数 `$1`, `$2`, ...
字符串字面量（含 E'...' 转义串和 $tag$...$tag$ 美元引用）、带引号的标识符和注释中的 `?` 不会被改写。

注意: JSONB 运算符 `?`、`?|`、`?&` 与占位符无法区分，传入参数时会被当作占位符改写。
使用这些运算符的查询请直接以 `$1`, `$2` 书写参数。
"""

import re

DEFAULT_PLACEHOLDER = "?"

_DOLLAR_TAG = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)?\$')


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in ("_", "$")


def _skip_quoted(sql: str, start: int, quote: str, backslash_escapes: bool = False) -> int:
    """返回引号段结束后的位置，连续两个引号视为转义；E'...' 中反斜杠同样转义"""
    i = start + 1
    length = len(sql)
    while i < length:
        ch = sql[i]
        if backslash_escapes and ch == "\\":
            i += 2
            continue
        if ch == quote:
            if i + 1 < length and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return length


def _skip_dollar_quoted(sql: str, start: int):
    """位于美元引用开头时返回结束位置，否则返回 None"""
    if start > 0 and _is_ident_char(sql[start - 1]):
        return None
    match = _DOLLAR_TAG.match(sql, start)
    if match is None:
        return None
    tag = match.group(0)
    end = sql.find(tag, match.end())
    return len(sql) if end == -1 else end + len(tag)


def _skip_comment(sql: str, start: int) -> int:
    if sql.startswith("--", start):
        end = sql.find("\n", start)
        return len(sql) if end == -1 else end
    end = sql.find("*/", start + 2)
    return len(sql) if end == -1 else end + 2


def _is_escape_string(sql: str, quote_at: int) -> bool:
    if quote_at < 1 or sql[quote_at - 1] not in ("E", "e"):
        return False
    return quote_at < 2 or not _is_ident_char(sql[quote_at - 2])


def rewrite_placeholders(sql: str, count: int, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """
    将前 count 个占位符依次替换为 $1..$count

    Args:
        sql: 原始 SQL
        count: 参数个数
        placeholder: 输入 SQL 使用的占位符

    Returns:
        str: 改写后的 SQL，多余的占位符保持原样
    """
    if count <= 0 or placeholder not in sql:
        return sql

    parts = []
    index = 0
    last = 0
    length = len(sql)
    i = 0

    while i < length and index < count:
        ch = sql[i]
        if ch == "'":
            i = _skip_quoted(sql, i, ch, backslash_escapes=_is_escape_string(sql, i))
        elif ch == '"':
            i = _skip_quoted(sql, i, ch)
        elif sql.startswith("--", i) or sql.startswith("/*", i):
            i = _skip_comment(sql, i)
        elif sql.startswith(placeholder, i):
            index += 1
            parts.append(sql[last:i])
            parts.append(f"${index}")
            i += len(placeholder)
            last = i
        elif ch == "$":
            end = _skip_dollar_quoted(sql, i)
            i = i + 1 if end is None else end
        else:
            i += 1

    parts.append(sql[last:])
    return "".join(parts)
