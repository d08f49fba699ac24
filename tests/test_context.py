from glicol.context import AudioContext, AudioContextBuilder, AudioContextConfig
from glicol.graph import Node, NodeData
from glicol.messages import Index, IndexOrder, SetBPM, SetToNumber


class Const(Node):
    def __init__(self, value):
        self.value = value
        self.messages = []

    def process(self, inputs, output):
        for buf in output:
            buf.copy_from([self.value] * len(buf))

    def send_msg(self, msg):
        self.messages.append(msg)
        if isinstance(msg, SetToNumber):
            self.value = msg.value


def test_default_config_values():
    config = AudioContextConfig()
    assert (config.sr, config.channels, config.max_nodes, config.max_edges) == (
        44100,
        2,
        1024,
        1024,
    )


def test_builder_returns_new_builders():
    base = AudioContextBuilder(8)
    changed = base.sr(48000).channels(1).max_nodes(16).max_edges(32)
    assert base.config == AudioContextConfig()
    assert changed.config == AudioContextConfig(48000, 1, 16, 32)
    assert changed.block_size == 8


def test_build_creates_destination_and_input():
    context = AudioContextBuilder(8).channels(1).build()
    assert (context.destination, context.input) == (0, 1)
    assert len(context.graph[context.destination].buffers) == 1
    assert len(context.graph[context.input].buffers[0]) == 8


def test_next_block_and_message():
    context = AudioContextBuilder(128).sr(44100).channels(1).build()
    node_a = context.add_mono_node(Const(42.0))
    context.connect(node_a, context.destination)
    assert list(context.next_block()[0]) == [42.0] * 128
    context.send_msg(node_a, SetToNumber(0, 100.0))
    assert list(context.next_block()[0]) == [100.0] * 128


def test_mono_node_fills_stereo_destination():
    context = AudioContextBuilder(8).channels(2).build()
    node = context.add_mono_node(Const(0.5))
    context.connect(node, context.destination)
    left, right = context.next_block()
    assert list(left) == list(right) == [0.5] * 8


def test_connect_sends_index_to_target():
    context = AudioContext(block_size=4)
    source = context.add_mono_node(Const(1.0))
    target_node = Const(0.0)
    target = context.add_stereo_node(target_node)
    context.connect(source, target)
    context.connect_with_order(source, target, 3)
    assert target_node.messages == [Index(source), IndexOrder(3, source)]


def test_chain_links_consecutive_nodes():
    context = AudioContext(block_size=4)
    nodes = [Const(0.0) for _ in range(3)]
    indices = [context.add_mono_node(n) for n in nodes]
    edges = context.chain(indices)
    assert len(edges) == len(indices) - 1
    assert nodes[1].messages == [Index(indices[0])]
    assert nodes[2].messages == [Index(indices[1])]
    assert context.graph.incoming(indices[2]) == [indices[1]]


def test_chain_boxed_adds_and_links():
    context = AudioContext(block_size=4)
    datas = [NodeData.mono(Const(0.0), 4) for _ in range(2)]
    indices, edges = context.chain_boxed(datas)
    assert [context.graph[i] for i in indices] == datas
    assert len(edges) == 1
    assert datas[1].node.messages == [Index(indices[0])]


def test_add_node_chain_sends_no_messages():
    context = AudioContext(block_size=4)
    datas = [NodeData.mono(Const(0.0), 4) for _ in range(3)]
    indices, edges = context.add_node_chain(datas)
    assert len(edges) == 2
    assert all(d.node.messages == [] for d in datas)
    assert context.graph.incoming(indices[1]) == [indices[0]]


def test_send_msg_to_all_reaches_every_node():
    context = AudioContext(block_size=4)
    nodes = [Const(0.0), Const(1.0)]
    for node in nodes:
        context.add_mono_node(node)
    context.send_msg_to_all(SetBPM(90.0))
    assert all(node.messages == [SetBPM(90.0)] for node in nodes)


def test_reset_restores_fresh_graph():
    context = AudioContext(block_size=4)
    node = context.add_mono_node(Const(1.0))
    context.connect(node, context.destination)
    context.reset()
    assert len(context.graph) == 2
    assert (context.destination, context.input) == (0, 1)
    assert [list(b) for b in context.next_block()] == [[0.0] * 4, [0.0] * 4]