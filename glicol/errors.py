"""Error types raised while parsing code and updating the audio graph."""

from __future__ import annotations

import enum
from collections.abc import Iterable


class Rule(enum.Enum):
    """Grammar rules that parsing errors can refer to."""

    BLOCK = "block"
    LINE = "line"
    REFERENCE = "reference"
    CHAIN = "chain"
    NODE = "node"
    POINTS = "points"
    POINTS_INNER = "points_inner"
    MATH_EXPRESSION = "math_expression"
    IS_LOOPING = "is_looping"
    TIME = "time"
    NUMBER = "number"
    INTEGER = "integer"
    BAR = "bar"
    SECOND = "second"
    MS = "ms"
    REST = "rest"
    NOTE_REF = "note_ref"
    SYMBOL = "symbol"
    EVENT = "event"
    PATTERN = "pattern"
    PATTERN_EVENT_BODY = "pattern_event_body"
    VALUE_TIME = "value_time"
    CODE = "code"
    DELAYN = "delayn"
    DELAYMS = "delayms"
    IMP = "imp"
    TRI = "tri"
    SQU = "squ"
    SAW = "saw"
    ONEPOLE = "onepole"
    SIN = "sin"
    MUL = "mul"
    ADD = "add"
    PAN = "pan"
    SEQ = "seq"
    CHOOSE = "choose"
    MIX = "mix"
    SP = "sp"
    SPEED = "speed"
    CONSTSIG = "constsig"
    ADC = "adc"
    BD = "bd"
    SN = "sn"
    HH = "hh"
    SAWSYNTH = "sawsynth"
    SQUSYNTH = "squsynth"
    TRISYNTH = "trisynth"
    LPF = "lpf"
    PSAMPLER = "psampler"
    BALANCE = "balance"
    RHPF = "rhpf"
    APFMSGAIN = "apfmsgain"
    REVERB = "reverb"
    ENVPERC = "envperc"
    ADSR = "adsr"
    PLATE = "plate"
    GET = "get"
    NOISE = "noise"
    META = "meta"
    EXPR = "expr"
    EVAL = "eval"
    ARRANGE = "arrange"
    MSGSYNTH = "msgsynth"
    PATTERN_SYNTH = "pattern_synth"


class GlicolError(Exception):
    """Base class of all errors reported by the engine and the parser."""


class ParseError(GlicolError):
    """The code could not be parsed; records what was expected where."""

    def __init__(
        self,
        positives: Iterable[Rule],
        negatives: Iterable[Rule] = (),
        position: int = 0,
        code: str = "",
    ) -> None:
        self.positives = list(positives)
        self.negatives = list(negatives)
        self.position = max(0, min(position, len(code)))
        self.code = code
        before = code[: self.position]
        self.line = before.count("\n") + 1
        self.column = self.position - (before.rfind("\n") + 1) + 1
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = []
        if self.positives:
            parts.append("expected " + ", ".join(r.value for r in self.positives))
        if self.negatives:
            parts.append("unexpected " + ", ".join(r.value for r in self.negatives))
        detail = "; ".join(parts) or "unknown parsing error"
        return f"Parsing error at line {self.line}, column {self.column}: {detail}"


class NonExistReferenceError(GlicolError):
    """A chain refers to a reference that is defined nowhere."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"There is no reference named {name}")


class NonExistSampleError(GlicolError):
    """A node refers to a sample that has not been loaded."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"There is no sample named {name}s")


def get_error_info(error: ParseError) -> tuple[list[Rule], list[Rule]]:
    """Return the expected and the unexpected rules of a parsing error."""
    if not isinstance(error, ParseError):
        raise TypeError(f"not a parsing error: {error!r}")
    return list(error.positives), list(error.negatives)