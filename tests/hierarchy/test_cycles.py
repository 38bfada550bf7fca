from __future__ import annotations

from src.role_hierarchy.role_hierarchy.hierarchy.cycles import find_cycle, has_cycle, would_create_cycle
from src.role_hierarchy.role_hierarchy.hierarchy.model import SupervisionEdge, WorkflowConnection


def edges(*pairs):
    return [SupervisionEdge(id=f"e{i}", source=s, target=t) for i, (s, t) in enumerate(pairs)]


def test_closing_a_chain_is_a_cycle():
    chain = edges(("A", "B"), ("B", "C"))

    assert would_create_cycle("C", "A", chain) is True


def test_parallel_path_is_not_a_cycle():
    chain = edges(("A", "B"), ("B", "C"))

    assert would_create_cycle("A", "C", chain) is False


def test_self_loop_is_always_a_cycle():
    assert would_create_cycle("A", "A", []) is True
    assert would_create_cycle("A", "A", edges(("B", "C"))) is True


def test_unrelated_nodes_never_cycle():
    assert would_create_cycle("X", "Y", edges(("A", "B"), ("B", "C"))) is False


def test_traversal_terminates_on_diamond_with_shared_descendants():
    diamond = edges(("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"), ("D", "E"))

    assert would_create_cycle("E", "A", diamond) is True
    assert would_create_cycle("B", "C", diamond) is False


def test_find_cycle_returns_closed_path():
    conns = [
        WorkflowConnection(id="1", source="A", target="B"),
        WorkflowConnection(id="2", source="B", target="C"),
        WorkflowConnection(id="3", source="C", target="A"),
    ]

    cycle = find_cycle(["A", "B", "C"], conns)

    assert cycle is not None
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"A", "B", "C"}


def test_find_cycle_none_for_dag():
    assert find_cycle(["A", "B", "C", "D"], edges(("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"))) is None


def test_find_cycle_sees_cycles_through_unlisted_nodes():
    # X and Y are not in node_ids but still form a loop
    assert has_cycle(["A"], edges(("A", "X"), ("X", "Y"), ("Y", "X"))) is True


def test_find_cycle_accepts_generator_of_ids():
    assert has_cycle((n for n in ["A", "B"]), edges(("A", "B"), ("B", "A"))) is True
