"""Tests for the functional API: searching, statistics and serialization."""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzleforest import (
    Element,
    ElementNotPresentError,
    Tree,
    count_elements,
    find_elements,
    get_element_paths,
    get_forest_stats,
    get_leaf_elements,
    serialize_tree,
    traverse_forest,
    tree_to_json,
)


@pytest.fixture
def forest():
    """a -> [a1 -> [a11], a2], b -> [b1]"""
    elements = {
        name: Element(uuid=name, size=len(name))
        for name in ("a", "a1", "a11", "a2", "b", "b1")
    }
    tree = Tree([elements["a"], elements["b"]])
    tree.add(elements["a1"], under=elements["a"])
    tree.add(elements["a11"], under=elements["a1"])
    tree.add(elements["a2"], under=elements["a"])
    tree.add(elements["b1"], under=elements["b"])
    return tree, elements


def test_traverse_forest_defaults_to_pre_order(forest):
    tree, _ = forest
    order = [element.identifier() for element, _ in traverse_forest(tree)]
    assert order == ["a", "a1", "a11", "a2", "b", "b1"]


def test_traverse_forest_with_strategy_name(forest):
    tree, elements = forest
    visited = list(traverse_forest(tree, start=elements["a"], strategy="bfs"))
    assert [(e.identifier(), d) for e, d in visited] == [("a", 0), ("a1", 1), ("a2", 1), ("a11", 2)]


def test_traverse_forest_rejects_foreign_start(forest):
    tree, _ = forest
    with pytest.raises(ElementNotPresentError):
        list(traverse_forest(tree, start=Element(uuid="elsewhere")))


def test_find_and_count(forest):
    tree, elements = forest
    big = list(find_elements(tree, lambda e: e.size >= 2))
    assert big == [elements["a1"], elements["a11"], elements["a2"], elements["b1"]]
    assert count_elements(tree) == 6
    assert count_elements(tree, max_depth=0) == 2


def test_leaf_elements(forest):
    tree, _ = forest
    leaves = [element.identifier() for element in get_leaf_elements(tree)]
    assert leaves == ["a11", "a2", "b1"]


def test_element_paths(forest):
    tree, _ = forest
    paths = list(get_element_paths(tree))
    assert ["a", "a1", "a11"] in paths
    assert ["b", "b1"] in paths
    assert ["b"] in paths
    assert len(paths) == 6


def test_forest_stats(forest):
    tree, _ = forest
    stats = get_forest_stats(tree)

    assert stats["total_elements"] == 6
    assert stats["root_count"] == 2
    assert stats["leaf_elements"] == 3
    assert stats["internal_elements"] == 3
    assert stats["max_depth"] == 2
    assert stats["depths"] == {0: 2, 1: 3, 2: 1}
    assert stats["average_branching"] == pytest.approx(4 / 3)


def test_forest_stats_empty():
    stats = get_forest_stats(Tree())
    assert stats["total_elements"] == 0
    assert stats["average_branching"] == 0


def test_serialize_tree_shape(forest):
    tree, _ = forest
    data = serialize_tree(tree)

    assert [node["element"]["uuid"] for node in data["roots"]] == ["a", "b"]
    a_node = data["roots"][0]
    assert a_node["element"] == {"uuid": "a", "size": 1}
    assert [child["element"]["uuid"] for child in a_node["children"]] == ["a1", "a2"]
    assert a_node["children"][0]["children"][0] == {
        "element": {"uuid": "a11", "size": 3},
        "children": [],
    }
    assert tree.to_dict() == data


def test_serialize_falls_back_to_raw_element():
    class Plain:
        def identifier(self):
            return "plain"

    plain = Plain()
    data = serialize_tree(Tree([plain]))
    assert data == {"roots": [{"element": plain, "children": []}]}


def test_serialize_empty_tree():
    assert serialize_tree(Tree()) == {"roots": []}


def test_tree_to_json(forest):
    tree, _ = forest
    text = tree_to_json(tree, indent=2)
    assert json.loads(text) == serialize_tree(tree)


def test_tree_to_json_stringifies_unknown_values():
    class Token:
        def identifier(self):
            return "t"

        def __str__(self):
            return "<token>"

    decoded = json.loads(tree_to_json(Tree([Token()])))
    assert decoded == {"roots": [{"element": "<token>", "children": []}]}
