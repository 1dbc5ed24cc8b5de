"""Tests for ``?`` to ``$N`` placeholder rewriting."""

import pytest

from yoapi_plugin_pgsqldb.utils.placeholders import rewrite_placeholders


@pytest.mark.parametrize("sql, count, expected", [
    ("INSERT INTO t VALUES (?, ?)", 2, "INSERT INTO t VALUES ($1, $2)"),
    ("?", 1, "$1"),
    ("? = ?", 2, "$1 = $2"),
    ("SELECT * FROM t WHERE a = ? AND b = ? AND c = ?", 3,
     "SELECT * FROM t WHERE a = $1 AND b = $2 AND c = $3"),
])
def test_rewrites_in_order(sql, count, expected):
    assert rewrite_placeholders(sql, count) == expected


def test_extra_placeholders_are_left_alone():
    assert rewrite_placeholders("VALUES (?, ?, ?)", 2) == "VALUES ($1, $2, ?)"


def test_fewer_placeholders_than_params():
    assert rewrite_placeholders("WHERE a = ?", 3) == "WHERE a = $1"


def test_dollar_placeholders_unchanged():
    sql = "INSERT INTO t VALUES ($1, $2)"
    assert rewrite_placeholders(sql, 2) == sql


def test_zero_params():
    assert rewrite_placeholders("SELECT '?' , ?", 0) == "SELECT '?' , ?"


def test_skips_string_literals_and_identifiers():
    sql = "SELECT 'what?', \"col?\" FROM t WHERE a = ? AND b = 'it''s ?' AND c = ?"
    assert rewrite_placeholders(sql, 2) == (
        "SELECT 'what?', \"col?\" FROM t WHERE a = $1 AND b = 'it''s ?' AND c = $2"
    )


def test_skips_comments():
    sql = "SELECT ? -- why?\n, ? /* really? */ , ?"
    assert rewrite_placeholders(sql, 3) == "SELECT $1 -- why?\n, $2 /* really? */ , $3"


def test_custom_placeholder():
    assert rewrite_placeholders("a = %s AND b = %s", 2, placeholder="%s") == "a = $1 AND b = $2"


def test_skips_escape_string_literals():
    sql = r"SELECT E'it\'s ?' , ?"
    assert rewrite_placeholders(sql, 1) == r"SELECT E'it\'s ?' , $1"


def test_backslash_is_literal_outside_escape_strings():
    sql = "SELECT 'C:\\' , ?"
    assert rewrite_placeholders(sql, 1) == "SELECT 'C:\\' , $1"


@pytest.mark.parametrize("sql, expected", [
    ("SELECT $$what?$$, ?", "SELECT $$what?$$, $1"),
    ("SELECT $body$ it's ? $$ $body$, ?", "SELECT $body$ it's ? $$ $body$, $1"),
    ("SELECT a$b$ FROM t WHERE x = ?", "SELECT a$b$ FROM t WHERE x = $1"),
])
def test_skips_dollar_quoted_literals(sql, expected):
    assert rewrite_placeholders(sql, 1) == expected


def test_jsonb_question_operator_needs_dollar_params():
    assert rewrite_placeholders("SELECT data ? 'k' FROM t WHERE id = ?", 1) == (
        "SELECT data $1 'k' FROM t WHERE id = ?"
    )
    sql = "SELECT data ? 'k' FROM t WHERE id = $1"
    assert rewrite_placeholders(sql, 0) == sql
