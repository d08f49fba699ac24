"""The audio context: a graph with a destination, and ways to build it."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from .graph import Graph, Node, NodeData, Pass, Processor, Sum
from .messages import Index, IndexOrder, Message


@dataclass(frozen=True)
class AudioContextConfig:
    sr: int = 44100
    channels: int = 2
    max_nodes: int = 1024
    max_edges: int = 1024


@dataclass(frozen=True)
class AudioContextBuilder:
    """Builds an AudioContext step by step; every step returns a new builder."""

    block_size: int = 128
    config: AudioContextConfig = field(default_factory=AudioContextConfig)

    def sr(self, sr: int) -> "AudioContextBuilder":
        return replace(self, config=replace(self.config, sr=sr))

    def channels(self, channels: int) -> "AudioContextBuilder":
        return replace(self, config=replace(self.config, channels=channels))

    def max_nodes(self, max_nodes: int) -> "AudioContextBuilder":
        return replace(self, config=replace(self.config, max_nodes=max_nodes))

    def max_edges(self, max_edges: int) -> "AudioContextBuilder":
        return replace(self, config=replace(self.config, max_edges=max_edges))

    def build(self) -> "AudioContext":
        return AudioContext(self.config, self.block_size)


class AudioContext:
    """Holds the graph, its destination and input nodes, and renders blocks."""

    def __init__(
        self, config: Optional[AudioContextConfig] = None, block_size: int = 128
    ) -> None:
        self.config = config if config is not None else AudioContextConfig()
        self.block_size = block_size
        self.graph = Graph()
        self.processor = Processor()
        self.tags: dict[str, int] = {}
        self.destination, self.input = self._add_endpoints()

    def _add_endpoints(self) -> tuple[int, int]:
        channels = self.config.channels
        destination = self.graph.add_node(
            NodeData.multi_channel(channels, Sum(), self.block_size)
        )
        source = self.graph.add_node(
            NodeData.multi_channel(channels, Pass(), self.block_size)
        )
        return destination, source

    def reset(self) -> None:
        """Drop every node and edge, then recreate destination and input."""
        self.graph.clear()
        self.destination, self.input = self._add_endpoints()

    def add_mono_node(self, node: Node) -> int:
        return self.graph.add_node(NodeData.mono(node, self.block_size))

    def add_stereo_node(self, node: Node) -> int:
        return self.graph.add_node(NodeData.stereo(node, self.block_size))

    def add_multi_chan_node(self, channels: int, node: Node) -> int:
        return self.graph.add_node(
            NodeData.multi_channel(channels, node, self.block_size)
        )

    def connect(self, source: int, target: int) -> int:
        edge = self.graph.add_edge(source, target)
        self.graph[target].node.send_msg(Index(source))
        return edge

    def connect_with_order(self, source: int, target: int, pos: int) -> int:
        edge = self.graph.add_edge(source, target)
        self.graph[target].node.send_msg(IndexOrder(pos, source))
        return edge

    def chain(self, indices: Iterable[int]) -> list[int]:
        """Connect each node to the next, telling each target its source."""
        indices = list(indices)
        return [self.connect(a, b) for a, b in zip(indices, indices[1:])]

    def chain_boxed(self, nodes: Iterable[NodeData]) -> tuple[list[int], list[int]]:
        indices = [self.graph.add_node(data) for data in nodes]
        return indices, self.chain(indices)

    def add_node_chain(self, nodes: Iterable[NodeData]) -> tuple[list[int], list[int]]:
        """Add and link nodes without sending any index messages."""
        indices = [self.graph.add_node(data) for data in nodes]
        edges = [self.graph.add_edge(a, b) for a, b in zip(indices, indices[1:])]
        return indices, edges

    def next_block(self) -> list:
        self.processor.process(self.graph, self.destination)
        return self.graph[self.destination].buffers

    def send_msg(self, index: int, msg: Message) -> None:
        self.graph[index].node.send_msg(msg)

    def send_msg_to_all(self, msg: Message) -> None:
        for data in self.graph.node_weights():
            data.node.send_msg(msg)