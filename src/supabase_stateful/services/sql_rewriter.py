"""Rewrite dumped INSERT statements into conflict-tolerant form.

Statements are located with a small scanner that understands the lexical
pieces of a pg_dump script, so a semicolon inside a quoted value never ends
a statement:

- single-quoted strings (``''`` doubling, ``E''`` backslash escapes)
- double-quoted identifiers
- dollar-quoted bodies (``$$ ... $$``, ``$tag$ ... $tag$``)
- ``--`` line comments and nested ``/* */`` block comments
- psql meta-command lines such as ``\\restrict`` or ``\\connect``
"""

from __future__ import annotations

import re

ON_CONFLICT_CLAUSE = "ON CONFLICT DO NOTHING"

_INSERT_HEAD = re.compile(r"INSERT\s+INTO\b", re.IGNORECASE)
_CONFLICT_TAIL = re.compile(r"\bON\s+CONFLICT\s+DO\s+NOTHING\s*$", re.IGNORECASE)
_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _skip_quoted(sql: str, i: int, quote: str, backslash: bool = False) -> int:
    """Return the index just past the literal that opens at ``i``."""
    n = len(sql)
    j = i + 1
    while j < n:
        ch = sql[j]
        if backslash and ch == "\\":
            j += 2
            continue
        if ch == quote:
            if j + 1 < n and sql[j + 1] == quote:
                j += 2
                continue
            return j + 1
        j += 1
    return n


def _skip_block_comment(sql: str, i: int) -> int:
    n = len(sql)
    depth = 0
    j = i
    while j < n:
        if sql.startswith("/*", j):
            depth += 1
            j += 2
        elif sql.startswith("*/", j):
            depth -= 1
            j += 2
            if depth == 0:
                return j
        else:
            j += 1
    return n


def _skip_line(sql: str, i: int) -> int:
    end = sql.find("\n", i)
    return len(sql) if end == -1 else end + 1


def statement_spans(sql: str) -> list[tuple[int, int]]:
    """Return ``(start, semicolon_index)`` for every terminated statement.

    ``start`` is the first code character of the statement (leading
    whitespace and comments excluded). An unterminated trailing fragment is
    not reported.
    """
    spans: list[tuple[int, int]] = []
    n = len(sql)
    i = 0
    start: int | None = None

    while i < n:
        ch = sql[i]

        if start is None:
            if ch.isspace():
                i += 1
                continue
            if ch == "\\":
                i = _skip_line(sql, i)
                continue

        if sql.startswith("--", i):
            i = _skip_line(sql, i)
            continue
        if sql.startswith("/*", i):
            i = _skip_block_comment(sql, i)
            continue

        if start is None:
            start = i

        if ch == "'":
            escaped = (
                i > 0
                and sql[i - 1] in "eE"
                and (i < 2 or not _is_ident_char(sql[i - 2]))
            )
            i = _skip_quoted(sql, i, "'", backslash=escaped)
        elif ch == '"':
            i = _skip_quoted(sql, i, '"')
        elif ch == "$" and (i == 0 or not _is_ident_char(sql[i - 1])):
            match = _DOLLAR_TAG.match(sql, i)
            if match:
                tag = match.group(0)
                close = sql.find(tag, match.end())
                i = n if close == -1 else close + len(tag)
            else:
                i += 1
        elif ch == ";":
            spans.append((start, i))
            start = None
            i += 1
        else:
            i += 1

    return spans


def is_insert(statement: str) -> bool:
    return _INSERT_HEAD.match(statement) is not None


def make_idempotent(sql: str) -> tuple[str, int]:
    """Append ``ON CONFLICT DO NOTHING`` to every INSERT statement.

    Column lists and value tuples are left untouched; statements that
    already end with the clause are kept as they are.

    Returns:
        The rewritten SQL and the number of statements rewritten
    """
    pieces: list[str] = []
    last = 0
    rewritten = 0

    for start, end in statement_spans(sql):
        body = sql[start:end]
        if not is_insert(body) or _CONFLICT_TAIL.search(body):
            continue
        pieces.append(sql[last:end])
        pieces.append(f"\n{ON_CONFLICT_CLAUSE}")
        last = end
        rewritten += 1

    pieces.append(sql[last:])
    return "".join(pieces), rewritten
