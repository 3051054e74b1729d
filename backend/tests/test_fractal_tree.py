"""
Tests for fractal tree construction and ring layout.
"""

import copy
import math

import pytest

from layout import LayoutNode, build_tree, create_tree, relayout, score_complexity, serialize_tree
from layout.constants import ROOT_ANCHOR

from conftest import make_chain, make_task


class TestScoreComplexity:
    def test_bare_task_scores_one(self):
        assert score_complexity(make_task("a")) == 1.0

    def test_description_and_immediate_subtasks(self):
        task = make_task("a", description="x" * 250, subtasks=[make_task("b"), make_task("c", subtasks=[make_task("d")])])
        # 1 + 250/100 + 2 immediate children (grandchild not counted)
        assert score_complexity(task) == pytest.approx(5.5)

    def test_description_contribution_capped_at_five(self):
        assert score_complexity(make_task("a", description="x" * 1000)) == pytest.approx(6.0)

    def test_clamped_to_ten(self):
        task = make_task("a", description="x" * 600, subtasks=[make_task(str(i)) for i in range(20)])
        assert score_complexity(task) == 10.0

    def test_empty_description_and_subtasks_are_zero_contribution(self):
        assert score_complexity(make_task("a", description="", subtasks=[])) == 1.0


class TestBuildTree:
    def test_children_follow_source_order(self):
        task = make_task("root", subtasks=[make_task("a"), make_task("b"), make_task("c")])
        root = build_tree(task)
        assert [c.task_id for c in root.children] == ["a", "b", "c"]
        assert all(c.depth == 1 for c in root.children)

    def test_depth_bound(self):
        root = create_tree(make_chain(9), max_depth=5)
        nodes = list(root.iter_nodes())
        assert max(n.depth for n in nodes) == 5
        assert len(nodes) == 6
        deepest = nodes[-1]
        assert deepest.children == []
        assert deepest.task["subtasks"]

    def test_child_depth_is_parent_plus_one(self):
        root = create_tree(make_chain(4))
        for node in root.iter_nodes():
            for child in node.children:
                assert child.depth == node.depth + 1

    def test_build_tree_lays_out_relative_to_origin(self):
        root = build_tree(make_task("root", subtasks=[make_task("a")]))
        assert root.position == {"x": 0.0, "y": 0.0, "z": 0.0}
        assert root.children[0].position == pytest.approx({"x": 0.5, "y": -0.5, "z": 0.0})

    def test_does_not_mutate_source(self):
        task = make_task("root", description="desc", subtasks=[make_task("a", subtasks=[make_task("b")])])
        before = copy.deepcopy(task)
        create_tree(task)
        assert task == before

    def test_complexity_in_range_for_wide_deep_tree(self):
        wide = [make_task(f"w{i}", description="y" * (i * 40), subtasks=[make_chain(6, prefix=f"c{i}_")]) for i in range(15)]
        root = create_tree(make_task("root", description="z" * 5000, subtasks=wide))
        for node in root.iter_nodes():
            assert 1.0 <= node.complexity <= 10.0


class TestLayout:
    def test_root_anchored(self):
        root = create_tree(make_task("root"))
        assert root.position == ROOT_ANCHOR

    def test_three_children_on_ring(self):
        root = create_tree(make_task("root", subtasks=[make_task("a"), make_task("b"), make_task("c")]))
        radius = 0.6
        for i, child in enumerate(root.children):
            angle = i * 2 * math.pi / 3
            assert child.position["x"] == pytest.approx(math.cos(angle) * radius)
            assert child.position["y"] == pytest.approx(1.5)
            assert child.position["z"] == pytest.approx(math.sin(angle) * radius)

    def test_ring_radius_never_below_half(self):
        root = create_tree(make_task("root", subtasks=[make_task("a"), make_task("b")]))
        for child in root.children:
            dx = child.position["x"] - root.position["x"]
            dz = child.position["z"] - root.position["z"]
            assert math.hypot(dx, dz) == pytest.approx(0.5)

    @pytest.mark.parametrize("n", [1, 4, 7, 12])
    def test_children_evenly_spaced_on_circle(self, n):
        root = create_tree(make_task("root", subtasks=[make_task(str(i)) for i in range(n)]))
        radius = max(0.5, n * 0.2)
        for i, child in enumerate(root.children):
            dx = child.position["x"] - root.position["x"]
            dz = child.position["z"] - root.position["z"]
            assert math.hypot(dx, dz) == pytest.approx(radius)
            angle = i * 2 * math.pi / n
            assert dx == pytest.approx(math.cos(angle) * radius, abs=1e-12)
            assert dz == pytest.approx(math.sin(angle) * radius, abs=1e-12)

    def test_grandchildren_placed_relative_to_parent(self):
        root = create_tree(make_task("root", subtasks=[make_task("a", subtasks=[make_task("a1")]), make_task("b")]))
        a = root.children[0]
        a1 = a.children[0]
        assert a1.position["x"] == pytest.approx(a.position["x"] + 0.5)
        assert a1.position["y"] == pytest.approx(a.position["y"] - 0.5)
        assert a1.position["z"] == pytest.approx(a.position["z"])

    def test_relayout_without_children_is_noop(self):
        node = LayoutNode(make_task("solo"))
        node.position = {"x": 1.0, "y": 2.0, "z": 3.0}
        relayout(node)
        assert node.position == {"x": 1.0, "y": 2.0, "z": 3.0}
        assert node.children == []

    def test_deterministic_and_idempotent(self):
        task = make_task("root", description="d" * 120, subtasks=[
            make_task("a", status="Blocked", subtasks=[make_task("a1"), make_task("a2")]),
            make_task("b", status="Completed"),
        ])
        first = serialize_tree(create_tree(task))
        second = serialize_tree(create_tree(copy.deepcopy(task)))
        assert first == second

    def test_relayout_again_gives_same_positions(self):
        root = create_tree(make_task("root", subtasks=[make_task("a", subtasks=[make_task("a1")])]))
        before = serialize_tree(root)
        relayout(root)
        assert serialize_tree(root) == before


class TestSerializeTree:
    def test_shape(self):
        root = create_tree(make_task("root", subtasks=[make_task("a")]))
        data = serialize_tree(root)
        assert data["id"] == "root"
        assert "subtasks" not in data["task"]
        assert data["children"][0]["id"] == "a"
        assert data["children"][0]["depth"] == 1
