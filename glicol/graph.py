"""The audio graph, its node data and the processor that renders it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .buffer import Buffer
from .messages import Message


@dataclass(frozen=True)
class Input:
    """The buffers of one upstream node, as seen by the node it feeds."""

    buffers: list
    index: int


class Node:
    """A processing unit of the graph; the base node outputs silence."""

    def process(self, inputs: dict, output: list) -> None:
        """Fill ``output`` from ``inputs``, a dict of node index to Input."""
        for buffer in output:
            buffer.silence()

    def send_msg(self, msg: Message) -> None:
        """Receive a message; the base node ignores every message."""


class Pass(Node):
    """Copies its first input to its output, or keeps its output if unfed."""

    def process(self, inputs: dict, output: list) -> None:
        if not inputs:
            return
        first = next(iter(inputs.values()))
        for out, source in zip(output, first.buffers):
            out.copy_from(source)


class Sum(Node):
    """Adds all its inputs together; mono inputs feed every output channel."""

    def process(self, inputs: dict, output: list) -> None:
        for buffer in output:
            buffer.silence()
        for incoming in inputs.values():
            if not incoming.buffers:
                continue
            last = len(incoming.buffers) - 1
            for channel, out in enumerate(output):
                source = incoming.buffers[min(channel, last)]
                out.copy_from(a + b for a, b in zip(out, source))


@dataclass
class NodeData:
    """A node together with the buffers it writes to."""

    node: Node
    buffers: list = field(default_factory=list)

    @classmethod
    def mono(cls, node: Node, block_size: int = 128) -> "NodeData":
        return cls.multi_channel(1, node, block_size)

    @classmethod
    def stereo(cls, node: Node, block_size: int = 128) -> "NodeData":
        return cls.multi_channel(2, node, block_size)

    @classmethod
    def multi_channel(cls, channels: int, node: Node, block_size: int = 128) -> "NodeData":
        return cls(node, [Buffer(block_size) for _ in range(channels)])


class Graph:
    """A directed graph of NodeData whose indices stay valid after removals."""

    def __init__(self) -> None:
        self._nodes: dict[int, NodeData] = {}
        self._edges: dict[int, tuple[int, int]] = {}
        self._next_node = 0
        self._next_edge = 0

    def add_node(self, data: NodeData) -> int:
        index = self._next_node
        self._nodes[index] = data
        self._next_node += 1
        return index

    def remove_node(self, index: int) -> Optional[NodeData]:
        """Remove a node and its edges; return its data, or None if absent."""
        data = self._nodes.pop(index, None)
        if data is not None:
            self._edges = {
                key: edge for key, edge in self._edges.items() if index not in edge
            }
        return data

    def add_edge(self, source: int, target: int) -> int:
        for index in (source, target):
            if index not in self._nodes:
                raise KeyError(f"no node exists for index {index}")
        edge = self._next_edge
        self._edges[edge] = (source, target)
        self._next_edge += 1
        return edge

    def clear_edges(self) -> None:
        self._edges.clear()
        self._next_edge = 0

    def clear(self) -> None:
        self._nodes.clear()
        self._next_node = 0
        self.clear_edges()

    def incoming(self, index: int) -> list[int]:
        """Sources of the edges into ``index``, most recently added first."""
        return [s for s, t in reversed(list(self._edges.values())) if t == index]

    def node_weights(self) -> Iterator[NodeData]:
        return iter(self._nodes.values())

    def __getitem__(self, index: int) -> NodeData:
        return self._nodes[index]

    def __contains__(self, index: object) -> bool:
        return index in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


class Processor:
    """Renders every node that feeds a given node, upstream nodes first."""

    def process(self, graph: Graph, node: int) -> None:
        for index in self._post_order(graph, node):
            data = graph[index]
            inputs = {
                source: Input(graph[source].buffers, source)
                for source in graph.incoming(index)
                if source != index
            }
            data.node.process(inputs, data.buffers)

    @staticmethod
    def _post_order(graph: Graph, start: int) -> Iterator[int]:
        if start not in graph:
            raise KeyError(f"no node exists for index {start}")
        discovered: set[int] = set()
        finished: set[int] = set()
        stack = [start]
        while stack:
            current = stack[-1]
            if current not in discovered:
                discovered.add(current)
                stack.extend(s for s in graph.incoming(current) if s not in discovered)
            else:
                stack.pop()
                if current not in finished:
                    finished.add(current)
                    yield current