"""Scale tests: deep chains, wide forests and the cost of snapshots."""

import sys
import time
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzleforest import Element, Tree, serialize_tree
from dazzleforest.testing import ForestTestHelper


def build_chain(length):
    """Tree holding a single path e0 -> e1 -> ... -> e{length-1}."""
    elements = [Element(uuid=f"e{i}") for i in range(length)]
    tree = Tree([elements[0]])
    for parent, child in zip(elements, elements[1:]):
        tree.add(child, under=parent, atomic=False)
    return tree, elements


def test_deep_chain_beyond_recursion_limit():
    """Test prune, traversal and serialization never recurse per level."""
    length = sys.getrecursionlimit() + 500
    tree, elements = build_chain(length)

    assert tree.depth(elements[-1]) == length - 1
    assert len(tree.descendants(elements[0])) == length - 1

    data = serialize_tree(tree)
    assert data["roots"][0]["element"]["uuid"] == "e0"

    subtree = tree.prune(elements[1])
    assert len(subtree) == length - 1
    assert tree.elements() == [elements[0]]
    ForestTestHelper(subtree).assert_valid()


@pytest.mark.slow
def test_wide_forest_merge_and_prune():
    roots = [Element(uuid=f"r{i}") for i in range(500)]
    tree = Tree(roots)
    for root in roots:
        for j in range(9):
            tree.add(Element(uuid=f"{root.identifier()}-{j}"), under=root, atomic=False)
    assert len(tree) == 5000

    for root in roots:
        tree.merge(tree.prune(root))

    assert tree.roots() == roots
    ForestTestHelper(tree).assert_valid()


@pytest.mark.slow
def test_atomic_overhead():
    tree, elements = build_chain(10000)

    start = time.perf_counter()
    for i in range(50):
        tree.add(Element(uuid=f"fast{i}"), atomic=False)
    fast = time.perf_counter() - start

    start = time.perf_counter()
    for i in range(50):
        tree.add(Element(uuid=f"safe{i}"))
    safe = time.perf_counter() - start

    print(f"\nnon-atomic: {fast * 1000:.1f}ms, atomic: {safe * 1000:.1f}ms")
    assert safe >= fast
    ForestTestHelper(tree).assert_valid()
