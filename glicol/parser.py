"""Turning node syntax into syntax tree components."""

from __future__ import annotations

import re
from typing import Callable

from . import ast
from .errors import ParseError, Rule
from .grammar import CODE, POINTS, STRING, WORD, NodeSyntax, Token, scan_block

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_INTEGER = re.compile(r"\d+")
_REFERENCE = re.compile(r"~?[A-Za-z][A-Za-z0-9_]*(?:\.\.)?")
_SYMBOL = re.compile(r"\\[A-Za-z0-9_]+")
_SEQ_COMPOUND = re.compile(r"(?:_|\d+|~[A-Za-z])+")
_SEQ_ELEMENT = re.compile(r"_|\d+|~[A-Za-z]")
_TIME = re.compile(
    r"\s*(\d+(?:\.\d+)?)(?:\s*/\s*(\d+(?:\.\d+)?))?"
    r"(?:\s*([+-])\s*(\d+(?:\.\d+)?)_?(ms|s))?\s*"
)


class _Args:
    def __init__(self, node: NodeSyntax) -> None:
        self.node = node
        self._tokens = list(node.args)

    def error(self, positives, position=None) -> ParseError:
        where = self.node.end if position is None else position
        return ParseError(positives, position=where, code=self.node.source)

    def next(self, positives) -> Token:
        if not self._tokens:
            raise self.error(positives)
        return self._tokens.pop(0)

    def rest(self) -> list:
        tokens, self._tokens = self._tokens, []
        return tokens

    def finish(self) -> None:
        if self._tokens:
            raise self.error([Rule.CHAIN], self._tokens[0].start)

    def as_number(self, tok: Token) -> float:
        if tok.kind == WORD and _NUMBER.fullmatch(tok.text):
            return float(tok.text)
        raise self.error([Rule.NUMBER], tok.start)

    def number(self) -> float:
        return self.as_number(self.next([Rule.NUMBER]))

    def integer(self) -> int:
        tok = self.next([Rule.INTEGER])
        if tok.kind == WORD and _INTEGER.fullmatch(tok.text):
            return int(tok.text)
        raise self.error([Rule.INTEGER], tok.start)

    def as_number_or_ref(self, tok: Token):
        if tok.kind == WORD:
            if _NUMBER.fullmatch(tok.text):
                return float(tok.text)
            if _REFERENCE.fullmatch(tok.text):
                return ast.Ref(tok.text)
        raise self.error([Rule.NUMBER, Rule.REFERENCE], tok.start)

    def number_or_ref(self):
        return self.as_number_or_ref(self.next([Rule.REFERENCE, Rule.NUMBER]))

    def reference(self) -> str:
        tok = self.next([Rule.REFERENCE])
        if tok.kind == WORD and _REFERENCE.fullmatch(tok.text):
            return tok.text
        raise self.error([Rule.REFERENCE], tok.start)

    def symbol(self) -> str:
        tok = self.next([Rule.SYMBOL])
        if tok.kind == CODE or (tok.kind == WORD and _SYMBOL.fullmatch(tok.text)):
            return tok.text
        raise self.error([Rule.SYMBOL], tok.start)

    def code(self) -> ast.CodeBlock:
        tok = self.next([Rule.CODE])
        if tok.kind != CODE:
            raise self.error([Rule.CODE], tok.start)
        return ast.CodeBlock(tok.text[1:-1])

    def pattern(self, tok: Token) -> ast.Pattern:
        val_times = []
        for item in tok.text.split():
            value, sep, time = item.rpartition("@")
            if not sep or not value:
                raise self.error([Rule.VALUE_TIME], tok.start)
            if not _NUMBER.fullmatch(time):
                raise self.error([Rule.NUMBER], tok.start)
            parsed = float(value) if _NUMBER.fullmatch(value) else value.strip("'")
            val_times.append((parsed, float(time)))
        if not val_times:
            raise self.error([Rule.PATTERN_EVENT_BODY], tok.start)
        span = 1.0
        if tok.detail:
            if not _NUMBER.fullmatch(tok.detail.strip()):
                raise self.error([Rule.NUMBER], tok.start)
            span = float(tok.detail)
        return ast.Pattern(ast.EventInner(tuple(val_times)), span)


def _evaluate(expr: str) -> float:
    """Evaluate an arithmetic expression of numbers, + - * / and parentheses."""
    tokens = re.findall(r"\d+(?:\.\d+)?|[-+*/()]|\S", expr)
    pos = 0

    def peek():
        return tokens[pos] if pos < len(tokens) else None

    def take():
        nonlocal pos
        pos += 1
        return tokens[pos - 1]

    def atom() -> float:
        tok = peek()
        if tok == "-":
            take()
            return -atom()
        if tok == "(":
            take()
            value = sum_()
            if take() != ")":
                raise ValueError(expr)
            return value
        if tok is not None and _NUMBER.fullmatch(tok):
            return float(take())
        raise ValueError(expr)

    def product() -> float:
        value = atom()
        while peek() in ("*", "/"):
            value = value * atom() if take() == "*" else value / atom()
        return value

    def sum_() -> float:
        value = product()
        while peek() in ("+", "-"):
            value = value + product() if take() == "+" else value - product()
        return value

    result = sum_()
    if pos != len(tokens):
        raise ValueError(expr)
    return result


def _points(args: _Args) -> ast.Points:
    tok = args.next([Rule.POINTS_INNER])
    if tok.kind != POINTS:
        raise args.error([Rule.POINTS_INNER], tok.start)
    span, looping = -1.0, False
    tail = tok.detail
    if tail.startswith("*"):
        expression = tail[1:].removesuffix("..")
        try:
            span = _evaluate("1*" + expression)
        except (ValueError, ZeroDivisionError, IndexError):
            raise args.error([Rule.MATH_EXPRESSION], tok.start) from None
        looping = tail.endswith("..")
    elif tail == "..":
        span, looping = 1.0, True

    points = []
    for item in filter(str.strip, tok.text.split(",")):
        time_text, sep, value_text = item.partition("=>")
        m = _TIME.fullmatch(time_text)
        if not sep or m is None:
            raise args.error([Rule.TIME], tok.start)
        if not _NUMBER.fullmatch(value_text.strip()):
            raise args.error([Rule.NUMBER], tok.start)
        top, bottom, sign, amount, unit = m.groups()
        bar = float(top) / float(bottom) if bottom else float(top)
        duration = None
        if sign:
            factor = -1.0 if sign == "-" else 1.0
            kind = ast.DurationUnit.MILLISECONDS if unit == "ms" else ast.DurationUnit.SECONDS
            duration = ast.Duration(kind, factor * float(amount))
        points.append((ast.TimeList(bar, duration), float(value_text)))
    return ast.Points(tuple(points), span, looping)


def _seq(args: _Args) -> ast.Seq:
    positives = [Rule.INTEGER, Rule.REST, Rule.NOTE_REF]
    compounds = args.rest()
    if not compounds:
        raise args.error(positives)
    events = []
    for i, tok in enumerate(compounds):
        if tok.kind != WORD or not _SEQ_COMPOUND.fullmatch(tok.text):
            raise args.error(positives, tok.start)
        elements = _SEQ_ELEMENT.findall(tok.text)
        for j, element in enumerate(elements):
            time = j / len(elements) + i
            if element == "_":
                continue
            note = ast.Ref(element) if element.startswith("~") else int(element)
            events.append((time, note))
    return ast.Seq(tuple(events))


def _signal(args: _Args):
    tok = args.next([Rule.NUMBER, Rule.REFERENCE, Rule.EVENT, Rule.PATTERN])
    if tok.kind == STRING:
        return args.pattern(tok)
    if tok.kind == WORD:
        if _NUMBER.fullmatch(tok.text):
            return float(tok.text)
        if _REFERENCE.fullmatch(tok.text):
            return ast.Ref(tok.text)
    raise args.error([Rule.NUMBER, Rule.REFERENCE, Rule.EVENT, Rule.PATTERN], tok.start)


def _delayn(args: _Args) -> ast.Delayn:
    tok = args.next([Rule.INTEGER, Rule.REFERENCE])
    if tok.kind == WORD:
        if _INTEGER.fullmatch(tok.text):
            return ast.Delayn(int(tok.text))
        if _NUMBER.fullmatch(tok.text):
            raise args.error([Rule.INTEGER], tok.start)
        if _REFERENCE.fullmatch(tok.text):
            return ast.Delayn(ast.Ref(tok.text))
    raise args.error([Rule.NUMBER, Rule.REFERENCE], tok.start)


def _psampler(args: _Args) -> ast.PSampler:
    tok = args.next([Rule.EVENT, Rule.PATTERN])
    if tok.kind != STRING:
        raise args.error([Rule.EVENT, Rule.PATTERN], tok.start)
    return ast.PSampler(args.pattern(tok))


def _single(cls) -> Callable[[_Args], ast.Component]:
    return lambda args: cls(args.number_or_ref())


def _numbers(cls, count: int) -> Callable[[_Args], ast.Component]:
    return lambda args: cls(*(args.number() for _ in range(count)))


_BUILDERS: dict[str, tuple[Rule, Callable[[_Args], ast.Component]]] = {
    "points": (Rule.POINTS, _points),
    "delayn": (Rule.DELAYN, _delayn),
    "delayms": (Rule.DELAYMS, _single(ast.Delayms)),
    "imp": (Rule.IMP, _single(ast.Imp)),
    "tri": (Rule.TRI, _single(ast.Tri)),
    "squ": (Rule.SQU, _single(ast.Squ)),
    "saw": (Rule.SAW, _single(ast.Saw)),
    "onepole": (Rule.ONEPOLE, _single(ast.Onepole)),
    "sin": (Rule.SIN, _single(ast.Sin)),
    "mul": (Rule.MUL, _single(ast.Mul)),
    "add": (Rule.ADD, _single(ast.Add)),
    "pan": (Rule.PAN, _single(ast.Pan)),
    "seq": (Rule.SEQ, _seq),
    "choose": (Rule.CHOOSE, lambda a: ast.Choose(tuple(a.as_number(t) for t in a.rest()))),
    "mix": (Rule.MIX, lambda a: ast.Mix(tuple(a.reference() for _ in list(a.node.args)))),
    "sp": (Rule.SP, lambda a: ast.Sp(a.symbol())),
    "speed": (Rule.SPEED, _numbers(ast.Speed, 1)),
    "constsig": (Rule.CONSTSIG, _numbers(ast.ConstSig, 1)),
    "sig": (Rule.CONSTSIG, _numbers(ast.ConstSig, 1)),
    "adc": (Rule.ADC, lambda a: ast.Adc(a.integer())),
    "bd": (Rule.BD, _single(ast.Bd)),
    "sn": (Rule.SN, _single(ast.Sn)),
    "hh": (Rule.HH, _single(ast.Hh)),
    "sawsynth": (Rule.SAWSYNTH, _numbers(ast.SawSynth, 2)),
    "squsynth": (Rule.SQUSYNTH, _numbers(ast.SquSynth, 2)),
    "trisynth": (Rule.TRISYNTH, _numbers(ast.TriSynth, 2)),
    "lpf": (Rule.LPF, lambda a: ast.Lpf(_signal(a), a.number())),
    "psampler": (Rule.PSAMPLER, _psampler),
    "balance": (Rule.BALANCE, lambda a: ast.Balance(a.reference(), a.reference())),
    "rhpf": (Rule.RHPF, lambda a: ast.Rhpf(a.number_or_ref(), a.number())),
    "apfmsgain": (Rule.APFMSGAIN, lambda a: ast.ApfmsGain(a.number_or_ref(), a.number())),
    "reverb": (Rule.REVERB, _numbers(ast.Reverb, 5)),
    "envperc": (Rule.ENVPERC, _numbers(ast.EnvPerc, 2)),
    "adsr": (Rule.ADSR, _numbers(ast.Adsr, 4)),
    "plate": (Rule.PLATE, _numbers(ast.Plate, 1)),
    "get": (Rule.GET, lambda a: ast.Get(a.reference())),
    "noise": (Rule.NOISE, lambda a: ast.Noise(a.integer())),
    "meta": (Rule.META, lambda a: ast.Meta(a.code())),
    "expr": (Rule.EXPR, lambda a: ast.Expr(a.code())),
    "eval": (Rule.EVAL, lambda a: ast.Eval(a.code())),
    "arrange": (Rule.ARRANGE, lambda a: ast.Arrange(tuple(a.as_number_or_ref(t) for t in a.rest()))),
    "msgsynth": (Rule.MSGSYNTH, lambda a: ast.MsgSynth(a.symbol(), a.number(), a.number())),
    "pattern_synth": (Rule.PATTERN_SYNTH, lambda a: ast.PatternSynth(a.symbol(), a.number())),
}

_NODE_RULES = list(dict.fromkeys(rule for rule, _ in _BUILDERS.values()))


def parse_node(node: NodeSyntax) -> ast.Component:
    """Build the component that a node's syntax describes."""
    entry = _BUILDERS.get(node.name)
    if entry is None:
        raise ParseError(_NODE_RULES, position=node.start, code=node.source)
    args = _Args(node)
    component = entry[1](args)
    args.finish()
    return component


def get_ast(code: str) -> ast.Ast:
    """Parse code into a syntax tree; raises ParseError on malformed input."""
    nodes = {
        line.name: [parse_node(node) for node in line.nodes]
        for line in scan_block(code)
    }
    return ast.Ast(nodes=nodes)