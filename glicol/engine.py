"""The live-coding engine: turns code into an audio graph and keeps it updated."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Optional

from .ast import (
    Adc,
    Ast,
    Component,
    EventInner,
    Expr,
    Get,
    Lpf,
    Meta,
    Mix,
    PSampler,
    PatternSynth,
    Reverb,
    Seq,
    Sp,
    ApfmsGain,
    Points,
    MsgSynth,
    Eval,
    Rhpf,
    Tri,
    Squ,
    Saw,
    Sin,
    Imp,
    Noise,
    Speed,
    Onepole,
    ConstSig,
)
from .context import AudioContext, AudioContextConfig
from .diff import GraphDiff, check_references, diff_asts, sequence_reference_order
from .errors import GlicolError, NonExistReferenceError, NonExistSampleError
from .graph import Node, NodeData, Pass, Sum
from .messages import (
    GlicolPara,
    ParaKind,
    ResetOrder,
    SetBPM,
    SetParam,
    SetPattern,
    SetRefOrder,
    SetSamplePattern,
    SetToBool,
    SetToNumber,
    SetToNumberList,
    SetToSamples,
    SetToSeq,
    SetToSymbol,
)
from .parser import get_ast

Sample = tuple
NodeFactory = Callable[
    [Component, Mapping[str, Sample], int, float, int, int], "tuple[NodeData, list[str]]"
]

_MONO = (
    Points,
    MsgSynth,
    PatternSynth,
    Eval,
    Lpf,
    Rhpf,
    Tri,
    Squ,
    Saw,
    Sin,
    Imp,
    Noise,
    Speed,
    Onepole,
    ConstSig,
)

_INPUT = "~input"


def _pattern_synth_events(symbol: str) -> list[tuple[float, float]]:
    events = []
    for event in symbol.replace("`", "").split(","):
        parts = [float(part) for part in event.split(" ") if part]
        if len(parts) < 2:
            raise ValueError(f"pattern synth event needs two numbers: {event!r}")
        events.append((parts[0], parts[1]))
    return events


def _default_node(
    component: Component,
    samples: Mapping[str, Sample],
    sr: int,
    bpm: float,
    seed: int,
    block_size: int,
) -> tuple[NodeData, list[str]]:
    """Build the node data and reference list of a component.

    ``get`` passes its input through and ``mix`` sums its inputs; every other
    node kind renders silence unless the engine is given a richer factory.
    """
    if isinstance(component, (Reverb, Expr)):
        raise ValueError(f"{component!r} is currently not supported within the engine")
    if isinstance(component, Adc):
        raise ValueError("the adc node needs audio input channels, which are not available")
    if isinstance(component, Meta):
        raise ValueError("the meta node is not supported within the engine")
    if isinstance(component, PSampler):
        if isinstance(component.source, EventInner):
            raise ValueError("an event inside psampler is not supported")
        for value, _ in component.source.event.val_times:
            name = value if isinstance(value, str) else ""
            if name not in samples:
                raise NonExistSampleError(name)
    if isinstance(component, Sp) and component.sample_sym not in samples:
        raise NonExistSampleError(component.sample_sym)
    if isinstance(component, PatternSynth):
        _pattern_synth_events(component.symbol)
    if isinstance(component, Lpf) and isinstance(component.signal, EventInner):
        raise ValueError("an event as a parameter to lpf is not supported")

    if isinstance(component, Get):
        node: Node = Pass()
    elif isinstance(component, Mix):
        node = Sum()
    else:
        node = Node()
    channels = 1 if isinstance(component, _MONO) else 2
    if isinstance(component, Seq):
        reflist = sequence_reference_order(component.events)[0]
    else:
        reflist = component.all_references()
    return NodeData.multi_channel(channels, node, block_size), reflist


def _copy_index(index_info: Mapping[str, list[int]]) -> dict[str, list[int]]:
    return {key: list(chain) for key, chain in index_info.items()}


def _parse_unsigned(text: str, limit: int) -> int:
    digits = text[1:] if text.startswith("+") else text
    if digits.isdigit() and digits.isascii():
        value = int(digits)
        if value <= limit:
            return value
    return 0


class Engine:
    """Parses code, diffs it against what runs, and renders audio blocks."""

    def __init__(
        self, block_size: int = 128, node_factory: Optional[NodeFactory] = None
    ) -> None:
        self.block_size = block_size
        self._node_factory = node_factory or _default_node
        self.context = AudioContext(AudioContextConfig(), block_size)
        self.index_info: dict[str, list[int]] = {
            _INPUT: [self.context.add_stereo_node(Pass())]
        }
        self.index_info_backup = _copy_index(self.index_info)
        self.samples_dict: dict[str, Sample] = {}
        self.livecoding = True
        self.need_update = False
        self._ast: Optional[Ast] = None
        self._temp_node_index: list[int] = []
        self._bpm = 120.0
        self._sr = 44100
        self._track_amp = 1.0
        self._seed = 42
        self._clock = 0

    @property
    def ast(self) -> Optional[Ast]:
        return self._ast

    @property
    def bpm(self) -> float:
        return self._bpm

    @property
    def sr(self) -> int:
        return self._sr

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def track_amp(self) -> float:
        return self._track_amp

    @property
    def clock(self) -> int:
        return self._clock

    def send_msg(self, msg: str) -> None:
        """Send ``chain,position,parameter,value`` commands separated by ``;``."""
        commands = "".join(c for c in msg if not c.isspace())
        for command in filter(None, commands.split(";")):
            parts = command.split(",")
            if len(parts) < 4:
                continue
            chain_name, chain_pos, param_pos, value = parts[:4]
            if chain_name not in self.index_info:
                continue
            target = self.index_info[chain_name][_parse_unsigned(chain_pos, 2**64 - 1)]
            position = _parse_unsigned(param_pos, 255)
            try:
                message = SetToNumber(position, float(value))
            except ValueError:
                message = SetToSymbol(position, value)
            self.context.graph[target].node.send_msg(message)

    def add_sample(self, name: str, sample: Iterable[float], channels: int, sr: int) -> None:
        self.samples_dict[name] = (tuple(sample), channels, sr)

    def reset(self) -> None:
        self.context.reset()
        self._ast = None
        self.index_info.clear()
        self.index_info_backup.clear()
        self._temp_node_index.clear()
        self.samples_dict.clear()
        self._bpm = 120.0
        self._track_amp = 1.0
        self._seed = 42
        self._clock = 0
        self.livecoding = True
        self.need_update = False

    def _make_node(self, component: Component) -> tuple[Any, list[str]]:
        return self._node_factory(
            component, self.samples_dict, self._sr, self._bpm, self._seed, self.block_size
        )

    def update_with_code(self, code: str) -> None:
        """Parse code and change the running graph to match it.

        Raises ParseError, NonExistReferenceError or NonExistSampleError; on a
        reference or update error the nodes added for this code are removed
        again and the chain indices restored.
        """
        new_ast = get_ast(code)
        self._temp_node_index.clear()

        diff = diff_asts(self._ast, new_ast, self._make_node, self.index_info)

        graph = self.context.graph
        while diff.node_add_list:
            key, position, data = diff.node_add_list.popleft()
            index = graph.add_node(data)
            self._temp_node_index.append(index)
            self.index_info.setdefault(key, []).insert(position, index)

        try:
            self._apply_updates(diff)
            check_references(diff.refpairlist, self.index_info, new_ast)
        except GlicolError as error:
            raise self.clean_up(error) from None

        for index in diff.idx_to_remove:
            graph.remove_node(index)

        graph.clear_edges()

        already_reset: set[int] = set()
        for reflist, name, position in diff.refpairlist:
            chain = self.index_info.get(name)
            if chain is None:
                raise NonExistReferenceError(name)
            index = chain[position]
            if index not in already_reset:
                graph[index].node.send_msg(ResetOrder())
                already_reset.add(index)
            for refname in reflist:
                if ".." in refname:
                    prefix = refname.replace("..", "")
                    for key, value in self.index_info.items():
                        if key.startswith(prefix):
                            self.context.connect(value[-1], index)
                else:
                    self.context.connect(self.index_info[refname][-1], index)

        for key, chain in self.index_info.items():
            for start, end in zip(chain, chain[1:]):
                self.context.connect_with_order(start, end, 0)
            if "~" not in key and chain:
                self.context.connect_with_order(chain[-1], self.context.destination, 0)

        self._ast = new_ast
        self.index_info_backup = _copy_index(self.index_info)

    def _apply_updates(self, diff: GraphDiff) -> None:
        graph = self.context.graph
        while diff.node_update_list:
            key, position, paras = diff.node_update_list.pop()
            chain = self.index_info.get(key)
            if chain is None:
                continue
            node = graph[chain[position]].node
            for i, para in enumerate(paras):
                self._apply_para(diff, node, key, position, i, para)

    def _apply_para(
        self, diff: GraphDiff, node: Node, key: str, position: int, i: int, para: GlicolPara
    ) -> None:
        kind = para.kind
        if kind is ParaKind.NUMBER:
            node.send_msg(SetToNumber(i, para.value))
        elif kind is ParaKind.REFERENCE:
            diff.refpairlist.append(([str(para.value)], key, position))
        elif kind is ParaKind.SAMPLE_SYMBOL:
            sample = self.samples_dict.get(para.value)
            if sample is None:
                raise NonExistSampleError(str(para.value))
            node.send_msg(SetToSamples(i, sample))
        elif kind is ParaKind.POINTS:
            node.send_msg(SetParam(i, para))
        elif kind is ParaKind.BOOL:
            node.send_msg(SetToBool(i, para.value))
        elif kind is ParaKind.SYMBOL:
            node.send_msg(SetToSymbol(i, str(para.value)))
        elif kind is ParaKind.SEQUENCE:
            node.send_msg(SetToSeq(i, para.value))
            reflist, order = sequence_reference_order(para.value)
            diff.refpairlist.append((reflist, key, position))
            node.send_msg(SetRefOrder(order))
        elif kind is ParaKind.NUMBER_LIST:
            node.send_msg(SetToNumberList(i, para.value))
        elif kind is ParaKind.PATTERN:
            selected: dict[str, Sample] = {}
            symbols: list[tuple[str, float]] = []
            numbers: list[tuple[float, float]] = []
            for value, time in para.value:
                if value.kind is ParaKind.NUMBER:
                    numbers.append((value.value, time))
                elif value.kind is ParaKind.SYMBOL:
                    sample = self.samples_dict.get(value.value)
                    if sample is None:
                        raise NonExistSampleError(str(value.value))
                    selected[value.value] = sample
                    symbols.append((value.value, time))
                else:
                    raise ValueError(f"unsupported value in a pattern: {value!r}")
            if symbols:
                node.send_msg(SetSamplePattern(symbols, para.span, selected))
            else:
                node.send_msg(SetPattern(numbers, para.span))

    def clean_up(self, error: GlicolError) -> GlicolError:
        """Remove the nodes added by a failed update and restore the indices."""
        for index in self._temp_node_index:
            self.context.graph.remove_node(index)
        self.index_info = _copy_index(self.index_info_backup)
        return error

    def next_block(self, inputs: Optional[Sequence[Sequence[float]]] = None) -> list:
        """Render one block; ``inputs`` feed up to two channels of ``~input``."""
        inputs = list(inputs or [])
        if inputs:
            buffers = self.context.graph[self.index_info[_INPUT][0]].buffers
            buffers[0].copy_from(inputs[0])
            if len(inputs) > 1:
                buffers[1].copy_from(inputs[1])
        self.context.processor.process(self.context.graph, self.context.destination)
        self._clock += self.block_size
        return self.context.graph[self.context.destination].buffers

    def set_bpm(self, bpm: float) -> None:
        self._bpm = bpm
        self.context.send_msg_to_all(SetBPM(bpm))

    def set_sr(self, sr: int) -> None:
        self._sr = sr

    def set_seed(self, seed: int) -> None:
        self._seed = seed

    def set_track_amp(self, amp: float) -> None:
        self._track_amp = amp