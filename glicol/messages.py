"""Messages that change node parameters while the graph is running."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional


class ParaKind(enum.Enum):
    """The kinds of parameter value a node can be given."""

    NUMBER = "number"
    BOOL = "bool"
    NUMBER_LIST = "number_list"
    REFERENCE = "reference"
    SAMPLE_SYMBOL = "sample_symbol"
    SYMBOL = "symbol"
    SEQUENCE = "sequence"
    PATTERN = "pattern"
    EVENT = "event"
    POINTS = "points"
    BAR = "bar"
    SECOND = "second"
    MILLISECOND = "millisecond"


@dataclass(frozen=True)
class GlicolPara:
    """A parameter value; ``span`` is only used by patterns."""

    kind: ParaKind
    value: Any
    span: Optional[float] = None

    def __post_init__(self) -> None:
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))


def _check_position(position: int) -> None:
    if not 0 <= position <= 255:
        raise ValueError(f"parameter position must be in 0..=255, got {position}")


class Message:
    """Base class of everything that can be sent to a node."""


@dataclass(frozen=True)
class SetToNumber(Message):
    position: int
    value: float

    def __post_init__(self) -> None:
        _check_position(self.position)


@dataclass(frozen=True)
class SetToNumberList(Message):
    position: int
    values: tuple

    def __post_init__(self) -> None:
        _check_position(self.position)
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class SetToSymbol(Message):
    position: int
    symbol: str

    def __post_init__(self) -> None:
        _check_position(self.position)


@dataclass(frozen=True)
class SetToSamples(Message):
    """Give a node a sample as ``(data, channels, sample_rate)``."""

    position: int
    sample: tuple

    def __post_init__(self) -> None:
        _check_position(self.position)
        object.__setattr__(self, "sample", tuple(self.sample))


@dataclass(frozen=True)
class SetSamplePattern(Message):
    pattern: tuple
    span: float
    samples: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", tuple(tuple(p) for p in self.pattern))
        object.__setattr__(self, "samples", dict(self.samples))


@dataclass(frozen=True)
class SetPattern(Message):
    pattern: tuple
    span: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", tuple(tuple(p) for p in self.pattern))


@dataclass(frozen=True)
class SetToSeq(Message):
    position: int
    events: tuple

    def __post_init__(self) -> None:
        _check_position(self.position)
        object.__setattr__(self, "events", tuple(tuple(e) for e in self.events))


@dataclass(frozen=True)
class SetRefOrder(Message):
    order: dict

    def __post_init__(self) -> None:
        object.__setattr__(self, "order", dict(self.order))


@dataclass(frozen=True)
class SetBPM(Message):
    bpm: float


@dataclass(frozen=True)
class SetSampleRate(Message):
    sr: int


@dataclass(frozen=True)
class MainInput(Message):
    index: int


@dataclass(frozen=True)
class SidechainInput(Message):
    index: int


@dataclass(frozen=True)
class Index(Message):
    index: int


@dataclass(frozen=True)
class IndexOrder(Message):
    position: int
    index: int


@dataclass(frozen=True)
class ResetOrder(Message):
    pass


@dataclass(frozen=True)
class SetParam(Message):
    position: int
    para: GlicolPara

    def __post_init__(self) -> None:
        _check_position(self.position)


@dataclass(frozen=True)
class SetToBool(Message):
    position: int
    value: bool

    def __post_init__(self) -> None:
        _check_position(self.position)