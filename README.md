# glicol

A graph-oriented live-coding language for audio. You write chains of audio
nodes as text. The engine parses the code and works out how it differs from
the code that is already running. It then updates the audio graph without
rebuilding it from scratch.

The package has no dependencies outside the standard library.

## Install

```
pip install glicol
```

## The language

Each line names a chain and lists its nodes, joined with `>>`:

```
o: sin 440 >> mul 0.5
~mod: sin 0.2 >> mul 200 >> add 500
out: saw 110 >> lpf ~mod 1.0
```

- Lines can also be separated with `;`.
- A newline followed by `>>` continues the chain.
- `//` starts a comment that runs to the end of the line.
- Chains whose names start with `~` are references. They are not sent to the output, but other chains can use them as parameters (`mul ~mod`).
- Chains without a `~` in their name are summed into the output.

The parser knows these node names:

```
points  delayn  delayms  imp  tri  squ  saw  onepole  sin  mul  add  pan
seq  choose  mix  sp  speed  constsig (or sig)  adc  bd  sn  hh
sawsynth  squsynth  trisynth  lpf  psampler  balance  rhpf  apfmsgain
reverb  envperc  adsr  plate  get  noise  meta  expr  eval  arrange
msgsynth  pattern_synth
```

Some parameter forms need a note:

- Sequences: `seq 60 _60 ~a`.
- Pattern strings: `lpf "100@0.0 200@0.5"(1) 1.0`.
- Point lists: `[0.1=>100, 1/4=>10.0]*(1/2)..`.
- Inline code: `` eval `...` ``.

## Parsing

`glicol.parser.get_ast` turns code into a `glicol.ast.Ast`. Its `nodes`
attribute maps chain names to lists of components:

```python
from glicol.parser import get_ast

ast = get_ast("o: saw 440 >> mul 0.3")
print(ast.nodes["o"])   # [Saw(param=440.0), Mul(param=0.3)]
```

How the AST represents values:

- Components are frozen dataclasses in `glicol.ast`.
- References are `glicol.ast.Ref` values.
- `Component.all_references()` lists the chains a component reads from.

The lower-level `glicol.grammar.scan_block` splits code into `LineSyntax`
and `NodeSyntax` values. `glicol.parser.parse_node` turns one `NodeSyntax`
into a component.

Invalid code raises `glicol.errors.ParseError`. Its members are:

- `positives`: the grammar rules (`glicol.errors.Rule`) that were expected.
- `negatives`: the grammar rules that were not expected.
- `line` and `column`: where the parse failed.

`glicol.errors.get_error_info(error)` returns the rules as
`(positives, negatives)`.

## Running the engine

```python
from glicol.engine import Engine

engine = Engine()                         # block size 128
engine.update_with_code("out: get ~input")
left, right = engine.next_block([[0.1] * 128, [0.2] * 128])
```

`next_block(inputs)` works as follows:

- It renders one block and returns the output buffers, one per channel.
- Up to two input channels go to the built-in `~input` chain.
- Each input channel must hold exactly `block_size` samples.

You can call `update_with_code` again at any time with new code:

- Components that are unchanged keep their nodes.
- New components get new nodes, and removed ones are dropped.
- All connections are then rebuilt.

If an update fails, the engine raises one of three errors:

- `ParseError` when the code does not parse.
- `NonExistReferenceError` when a reference names no chain.
- `NonExistSampleError` when an `sp` or `psampler` node names a sample that was not added with `add_sample`.

After a reference error, the nodes added for the new code are removed again and the chain indices are restored. All of these errors derive from `glicol.errors.GlicolError`.

Other controls:

- `send_msg("o,0,0,440")` changes parameters while running. It takes `chain,position,parameter,value` commands separated by `;`. A value that parses as a number is sent as `SetToNumber`; any other value is sent as `SetToSymbol`.
- `set_bpm` sends `SetBPM` to every node.
- `set_sr`, `set_seed` and `set_track_amp` store settings that are passed on to the node factory.
- `reset` clears the graph, the chains and the samples.

### Node factories

The engine builds a node for each component with a node factory. The
factory is called as

```
factory(component, samples, sr, bpm, seed, block_size) -> (NodeData, reference_names)
```

The default factory does only the following:

- It makes `get` a pass-through node (`glicol.graph.Pass`).
- It makes `mix` a summing node (`glicol.graph.Sum`).
- It gives every other component a node that outputs silence, still with the right channel count and references.
- It rejects `reverb`, `expr`, `adc` and `meta`, and an event passed to `lpf` or `psampler`, with `ValueError`.

To hear oscillators, filters, envelopes and the rest, pass your own factory:
`Engine(block_size=128, node_factory=my_factory)`.

## Building graphs by hand

`glicol.context.AudioContextBuilder` makes an `AudioContext`. You add and
connect nodes on it directly:

```python
from glicol.context import AudioContextBuilder
from glicol.graph import Pass

context = AudioContextBuilder(block_size=8).sr(44100).channels(2).build()
node = context.add_stereo_node(Pass())
context.connect(node, context.destination)
block = context.next_block()
```

The context provides these methods:

- `add_mono_node`, `add_stereo_node` and `add_multi_chan_node`.
- `connect`, `connect_with_order` and `chain`, which tell the target node its source with an `Index` or `IndexOrder` message.
- `chain_boxed` and `add_node_chain`.
- `send_msg` and `send_msg_to_all`.
- `reset`.

The graph itself is `glicol.graph.Graph`, and `glicol.graph.Processor`
renders it upstream-first. Buffers are fixed-size `glicol.buffer.Buffer`
objects.

To write a node, subclass `glicol.graph.Node` and implement
`process(inputs, output)`. It receives:

- `inputs`: a dict mapping node index to `Input`.
- `output`: the node's list of buffers.

Optionally implement `send_msg(msg)` to react to the message classes in
`glicol.messages`.

## What this package does not do

- It does not open an audio device or write audio files. It only fills buffers that you pass on yourself.
- It ships no oscillators, filters, envelopes, samplers or effects. Apart from `Pass` and `Sum`, node behaviour comes from a node factory you supply.
- It has no command-line program.