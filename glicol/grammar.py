"""Splitting source code into lines, chains and node syntax."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Union

from .errors import ParseError, Rule

WORD = "word"
STRING = "string"
CODE = "code"
POINTS = "points"

_WORD_RE = re.compile(r"""(?:(?!>>|//)[^\s;`"\[])+""")
_POINTS_TAIL_RE = re.compile(r"(\*\((?:[^()\n]|\([^()\n]*\))*\))?(\.\.)?")
_NAME_RE = re.compile(r"~?[A-Za-z_][A-Za-z0-9_]*(?:\.\.)?")


@dataclass(frozen=True)
class Token:
    """One argument as written: a word, a quoted pattern, inline code or a point list.

    ``detail`` holds what directly follows a pattern string (its span) or a
    point list (its span expression and loop marker).
    """

    kind: str
    text: str
    start: int
    end: int
    detail: str = ""


@dataclass(frozen=True)
class _Sep:
    kind: str
    start: int


@dataclass(frozen=True)
class NodeSyntax:
    """A node of a chain: its name and its raw argument tokens."""

    name: str
    args: tuple
    start: int
    end: int
    source: str = field(default="", repr=False, compare=False)


@dataclass(frozen=True)
class LineSyntax:
    """A named chain: ``name: node >> node ...``."""

    name: str
    start: int
    end: int
    nodes: tuple


def _lex(code: str) -> Iterator[Union[Token, _Sep]]:
    i, n = 0, len(code)
    while i < n:
        c = code[i]
        if c in " \t\r":
            i += 1
        elif code.startswith("//", i):
            j = code.find("\n", i)
            i = n if j < 0 else j
        elif c == "\n":
            yield _Sep("nl", i)
            i += 1
        elif c == ";":
            yield _Sep("semi", i)
            i += 1
        elif code.startswith(">>", i):
            yield _Sep("pipe", i)
            i += 2
        elif c == "`":
            j = code.find("`", i + 1)
            if j < 0:
                raise ParseError([Rule.CODE], position=i, code=code)
            yield Token(CODE, code[i : j + 1], i, j + 1)
            i = j + 1
        elif c == '"':
            j = code.find('"', i + 1)
            if j < 0:
                raise ParseError([Rule.PATTERN_EVENT_BODY], position=i, code=code)
            body, k, detail = code[i + 1 : j], j + 1, ""
            if k < n and code[k] == "(":
                m = code.find(")", k)
                if m < 0:
                    raise ParseError([Rule.NUMBER], position=k, code=code)
                detail, k = code[k + 1 : m], m + 1
            yield Token(STRING, body, i, k, detail)
            i = k
        elif c == "[":
            j = code.find("]", i)
            if j < 0:
                raise ParseError([Rule.POINTS_INNER], position=i, code=code)
            tail = _POINTS_TAIL_RE.match(code, j + 1)
            yield Token(POINTS, code[i + 1 : j], i, tail.end(), tail.group(0))
            i = tail.end()
        else:
            m = _WORD_RE.match(code, i)
            yield Token(WORD, m.group(0), i, m.end())
            i = m.end()


def _continues(items: list, index: int) -> bool:
    for item in items[index + 1 :]:
        if isinstance(item, _Sep) and item.kind == "nl":
            continue
        return isinstance(item, _Sep) and item.kind == "pipe"
    return False


def _build_line(items: list, code: str) -> LineSyntax:
    first = items[0]
    if not (isinstance(first, Token) and first.kind == WORD and first.text.endswith(":")):
        raise ParseError([Rule.REFERENCE], position=first.start, code=code)
    name = first.text[:-1]
    if not _NAME_RE.fullmatch(name):
        raise ParseError([Rule.REFERENCE], position=first.start, code=code)
    rest = items[1:]
    if not rest:
        raise ParseError([Rule.CHAIN], position=first.end, code=code)

    groups: list[list] = [[]]
    pipes: list[int] = []
    for item in rest:
        if isinstance(item, _Sep):
            groups.append([])
            pipes.append(item.start)
        else:
            groups[-1].append(item)

    nodes = []
    for number, group in enumerate(groups):
        if not group:
            position = pipes[number - 1] + 2 if number else first.end
            raise ParseError([Rule.NODE], position=position, code=code)
        head, args = group[0], group[1:]
        if head.kind == POINTS:
            name_of_node, args = "points", group
        elif head.kind == WORD:
            name_of_node = head.text
        else:
            raise ParseError([Rule.NODE], position=head.start, code=code)
        nodes.append(
            NodeSyntax(name_of_node, tuple(args), head.start, group[-1].end, code)
        )
    return LineSyntax(name, first.start, nodes[-1].end, tuple(nodes))


def scan_block(code: str) -> list[LineSyntax]:
    """Split code into its lines; newlines before ``>>`` continue a chain."""
    items = list(_lex(code))
    statements: list[list] = []
    current: list = []
    for index, item in enumerate(items):
        if isinstance(item, _Sep) and (
            item.kind == "semi" or (item.kind == "nl" and not _continues(items, index))
        ):
            if current:
                statements.append(current)
            current = []
        elif isinstance(item, _Sep) and item.kind == "nl":
            continue
        else:
            current.append(item)
    if current:
        statements.append(current)
    return [_build_line(statement, code) for statement in statements]