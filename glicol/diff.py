"""Working out how the audio graph must change when the code changes."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .ast import Ast, Component, Ref
from .errors import NonExistReferenceError

MakeNode = Callable[[Component], "tuple[Any, list[str]]"]


@dataclass
class GraphDiff:
    """The changes that turn the graph of one syntax tree into another's.

    ``refpairlist`` holds ``(reference names, chain name, position)`` for every
    node that reads from other chains; ``node_add_list`` holds
    ``(chain name, position, node data)`` in the order they must be inserted.
    """

    node_remove_list: list = field(default_factory=list)
    node_update_list: list = field(default_factory=list)
    refpairlist: list = field(default_factory=list)
    node_add_list: deque = field(default_factory=deque)
    idx_to_remove: list = field(default_factory=list)


def sequence_reference_order(events: Iterable) -> tuple[list[str], dict[str, int]]:
    """Return the distinct references of sequence events, in first-seen order.

    The second value maps each reference to its position in that order.
    """
    reflist: list[str] = []
    order: dict[str, int] = {}
    for _, note in events:
        if isinstance(note, Ref) and note.name not in order:
            order[note.name] = len(reflist)
            reflist.append(note.name)
    return reflist, order


def _add_nodes(
    diff: GraphDiff,
    chain_name: str,
    numbered: Iterable[tuple[int, Component]],
    make_node: MakeNode,
) -> None:
    for position, component in numbered:
        data, reflist = make_node(component)
        if reflist:
            diff.refpairlist.append((list(reflist), chain_name, position))
        diff.node_add_list.append((chain_name, position, data))


def diff_asts(
    old_ast: Optional[Ast],
    new_ast: Ast,
    make_node: MakeNode,
    index_info: dict[str, list[int]],
) -> GraphDiff:
    """Compare two syntax trees and collect the changes to the graph.

    Nodes of the new tree that are not in the old one are built with
    ``make_node``, which returns ``(node data, reference names)``. Once every
    node has been built, the chains and nodes that disappeared are removed
    from ``index_info`` and their graph indices are listed in
    ``idx_to_remove``. If ``make_node`` raises, ``index_info`` is untouched.
    """
    diff = GraphDiff()

    if old_ast is None:
        for chain_name, new_chain in new_ast.nodes.items():
            _add_nodes(diff, chain_name, enumerate(new_chain), make_node)
        return diff

    for chain_name, new_chain in new_ast.nodes.items():
        old_chain = old_ast.nodes.get(chain_name)
        if old_chain is None:
            _add_nodes(diff, chain_name, enumerate(new_chain), make_node)
            continue

        for old_position, old_component in enumerate(old_chain):
            match = next(
                (
                    (position, component)
                    for position, component in enumerate(new_chain)
                    if component == old_component
                ),
                None,
            )
            if match is None:
                diff.node_remove_list.append((chain_name, old_position))
                continue
            position, component = match
            reflist = component.all_references()
            if reflist:
                diff.refpairlist.append((list(reflist), chain_name, position))

        _add_nodes(
            diff,
            chain_name,
            (
                (position, component)
                for position, component in enumerate(new_chain)
                if component not in old_chain
            ),
            make_node,
        )

    for key in [k for k in old_ast.nodes if k not in new_ast.nodes]:
        if key not in index_info:
            raise KeyError(
                f"index info has no chain {key!r} although the previous code defined it"
            )
        diff.idx_to_remove.extend(index_info.pop(key))

    while diff.node_remove_list:
        key, position = diff.node_remove_list.pop()
        chain = index_info.get(key)
        if chain is not None:
            diff.idx_to_remove.append(chain.pop(position))

    return diff


def check_references(
    refpairs: Iterable,
    index_info: Mapping[str, Any],
    new_ast: Ast,
) -> None:
    """Raise NonExistReferenceError for any reference that cannot be resolved.

    A name ending in ``..`` matches every chain whose name starts with the
    rest of it; other names must be chains of the new tree or known indices.
    """
    for names, _, _ in refpairs:
        for refname in names:
            if ".." in refname:
                prefix = refname.replace("..", "")
                if not any(key.startswith(prefix) for key in index_info):
                    raise NonExistReferenceError(refname)
            elif refname not in new_ast.nodes and refname not in index_info:
                raise NonExistReferenceError(refname)