"""Cycle checks over supervision edges.

Edges are anything with ``source`` and ``target`` attributes, so the same
functions work on live :class:`SupervisionEdge` objects and on persisted
:class:`WorkflowConnection` records.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Protocol, Set


class _Edge(Protocol):
    source: str
    target: str


def adjacency(edges: Iterable[_Edge]) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = defaultdict(list)
    for e in edges:
        if e.target:
            out[e.source].append(e.target)
    return out


def would_create_cycle(source: str, target: str, edges: Iterable[_Edge]) -> bool:
    """Return True if adding ``source -> target`` would make a cycle.

    That happens exactly when ``source`` is already reachable from ``target``.
    ``source == target`` is a cycle of length zero and returns True.
    """
    children = adjacency(edges)
    visited: Set[str] = set()
    stack = [target]

    while stack:
        current = stack.pop()
        if current == source:
            return True
        if current in visited:
            continue
        visited.add(current)
        stack.extend(children.get(current, ()))

    return False


def find_cycle(node_ids: Iterable[str], edges: Iterable[_Edge]) -> Optional[List[str]]:
    """Return one cycle as a path ``[a, b, ..., a]``, or None if the graph is a DAG.

    Iterative DFS with an on-stack set. Edge endpoints missing from
    ``node_ids`` are still walked, so dangling connections cannot hide a cycle.
    """
    children = adjacency(edges)
    ids = list(node_ids)
    known = set(ids)
    roots = ids + [n for n in list(children) if n not in known]

    done: Set[str] = set()
    for root in roots:
        if root in done:
            continue

        path: List[str] = [root]
        on_path: Set[str] = {root}
        iters = [iter(children.get(root, ()))]

        while iters:
            child = next(iters[-1], None)
            if child is None:
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                iters.pop()
                continue
            if child in on_path:
                return path[path.index(child):] + [child]
            if child in done:
                continue
            path.append(child)
            on_path.add(child)
            iters.append(iter(children.get(child, ())))

    return None


def has_cycle(node_ids: Iterable[str], edges: Iterable[_Edge]) -> bool:
    return find_cycle(node_ids, edges) is not None
