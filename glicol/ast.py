"""Syntax tree of parsed code: chains of components keyed by name."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True, order=True)
class Ref:
    """A reference to another chain, such as ``~mod``."""

    name: str

    def __str__(self) -> str:
        return self.name


NumberOrRef = Union[float, Ref]
IntOrRef = Union[int, Ref]
EventValue = Union[str, float]


class DurationUnit(enum.IntEnum):
    BAR = 0
    SECONDS = 1
    MILLISECONDS = 2


@dataclass(frozen=True, order=True)
class Duration:
    """A time offset with its unit."""

    unit: DurationUnit
    value: float


@dataclass(frozen=True)
class TimeList:
    """A point in time: a bar fraction plus an optional offset."""

    bar: float
    time: Optional[Duration] = None


def _freeze(obj, name: str, inner=None) -> None:
    items = getattr(obj, name)
    if inner is not None:
        items = (inner(item) for item in items)
    object.__setattr__(obj, name, tuple(items))


@dataclass(frozen=True)
class EventInner:
    """Values paired with their relative times inside a pattern string."""

    val_times: tuple = ()

    def __post_init__(self) -> None:
        _freeze(self, "val_times", tuple)


@dataclass(frozen=True)
class Pattern:
    """An event together with the span of bars it covers."""

    event: EventInner
    span: float = 1.0


@dataclass(frozen=True)
class CodeBlock:
    """Inline code, without its surrounding backticks."""

    code: str


Signal = Union[float, Ref, EventInner, Pattern]


class Component:
    """A node in a chain."""

    def all_references(self) -> list[str]:
        """Return the names of every chain this component reads from."""
        return []


@dataclass(frozen=True)
class _SingleParam(Component):
    param: NumberOrRef

    def all_references(self) -> list[str]:
        return [self.param.name] if isinstance(self.param, Ref) else []


@dataclass(frozen=True)
class Delayn(_SingleParam):
    param: IntOrRef


@dataclass(frozen=True)
class Delayms(_SingleParam):
    pass


@dataclass(frozen=True)
class Imp(_SingleParam):
    pass


@dataclass(frozen=True)
class Tri(_SingleParam):
    pass


@dataclass(frozen=True)
class Squ(_SingleParam):
    pass


@dataclass(frozen=True)
class Saw(_SingleParam):
    pass


@dataclass(frozen=True)
class Onepole(_SingleParam):
    pass


@dataclass(frozen=True)
class Sin(_SingleParam):
    pass


@dataclass(frozen=True)
class Mul(_SingleParam):
    pass


@dataclass(frozen=True)
class Add(_SingleParam):
    pass


@dataclass(frozen=True)
class Pan(_SingleParam):
    pass


@dataclass(frozen=True)
class Bd(_SingleParam):
    pass


@dataclass(frozen=True)
class Sn(_SingleParam):
    pass


@dataclass(frozen=True)
class Hh(_SingleParam):
    pass


@dataclass(frozen=True)
class Points(Component):
    points: tuple = ()
    span: float = -1.0
    is_looping: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "points", tuple)


@dataclass(frozen=True)
class Seq(Component):
    events: tuple = ()

    def __post_init__(self) -> None:
        _freeze(self, "events", tuple)

    def all_references(self) -> list[str]:
        return [note.name for _, note in self.events if isinstance(note, Ref)]


@dataclass(frozen=True)
class Choose(Component):
    choices: tuple = ()

    def __post_init__(self) -> None:
        _freeze(self, "choices")


@dataclass(frozen=True)
class Arrange(Component):
    events: tuple = ()

    def __post_init__(self) -> None:
        _freeze(self, "events")

    def all_references(self) -> list[str]:
        return [event.name for event in self.events if isinstance(event, Ref)]


@dataclass(frozen=True)
class Mix(Component):
    nodes: tuple = ()

    def __post_init__(self) -> None:
        _freeze(self, "nodes")

    def all_references(self) -> list[str]:
        return list(self.nodes)


@dataclass(frozen=True)
class Sp(Component):
    sample_sym: str


@dataclass(frozen=True)
class Speed(Component):
    speed: float


@dataclass(frozen=True)
class ConstSig(Component):
    value: float


@dataclass(frozen=True)
class Adc(Component):
    port: int


@dataclass(frozen=True)
class SawSynth(Component):
    attack: float
    decay: float


@dataclass(frozen=True)
class SquSynth(Component):
    attack: float
    decay: float


@dataclass(frozen=True)
class TriSynth(Component):
    attack: float
    decay: float


@dataclass(frozen=True)
class MsgSynth(Component):
    symbol: str
    attack: float
    decay: float


@dataclass(frozen=True)
class PatternSynth(Component):
    symbol: str
    span: float


@dataclass(frozen=True)
class Lpf(Component):
    signal: Signal
    qvalue: float

    def all_references(self) -> list[str]:
        return [self.signal.name] if isinstance(self.signal, Ref) else []


@dataclass(frozen=True)
class PSampler(Component):
    source: Union[EventInner, Pattern]


@dataclass(frozen=True)
class Balance(Component):
    left: str
    right: str

    def all_references(self) -> list[str]:
        return [self.left, self.right]


@dataclass(frozen=True)
class Rhpf(Component):
    cutoff: NumberOrRef
    qvalue: float

    def all_references(self) -> list[str]:
        return [self.cutoff.name] if isinstance(self.cutoff, Ref) else []


@dataclass(frozen=True)
class ApfmsGain(Component):
    delay: NumberOrRef
    gain: float

    def all_references(self) -> list[str]:
        return [self.delay.name] if isinstance(self.delay, Ref) else []


@dataclass(frozen=True)
class Reverb(Component):
    dampening: float
    room_size: float
    width: float
    wet: float
    dry: float


@dataclass(frozen=True)
class Plate(Component):
    mix: float


@dataclass(frozen=True)
class EnvPerc(Component):
    attack: float
    decay: float


@dataclass(frozen=True)
class Adsr(Component):
    attack: float
    decay: float
    sustain: float
    release: float


@dataclass(frozen=True)
class Get(Component):
    reference: str

    def all_references(self) -> list[str]:
        return [self.reference]


@dataclass(frozen=True)
class Noise(Component):
    seed: int


@dataclass(frozen=True)
class Meta(Component):
    code: CodeBlock


@dataclass(frozen=True)
class Expr(Component):
    code: CodeBlock


@dataclass(frozen=True)
class Eval(Component):
    code: CodeBlock


@dataclass
class Ast:
    """Every chain of a program, keyed by its name."""

    nodes: dict = field(default_factory=dict)