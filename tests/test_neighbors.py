"""
Neighbor walker: same-depth walks, walks into coarser cells, face expansion into
finer leaves, and an exhaustive check against brute-force adjacency on an
adaptive tree.
"""

import numpy as np
import pytest

from isoplot.geometry import vertices_from_extremes
from isoplot.quadtree import CellTree, build_tree, leaves_in_direction, leaves_on_face, walk_in_direction


def _const(p):
    return 1.0


@pytest.fixture
def mixed_tree():
    """Root split once, child 1 split, and its child 0 split again."""
    tree = CellTree(2)
    root = tree.add_root(vertices_from_extremes(2, [0, 0], [1, 1], _const))
    c = tree.split(root, _const)
    c1 = tree.split(c[1], _const)
    c10 = tree.split(c1[0], _const)
    return tree, c, c1, c10


def test_sibling_walk(mixed_tree):
    tree, c, _, _ = mixed_tree
    assert walk_in_direction(tree, c[0], axis=0, direction=1) is c[1]
    assert walk_in_direction(tree, c[0], axis=1, direction=1) is c[2]
    assert walk_in_direction(tree, c[3], axis=0, direction=0) is c[2]


def test_walk_at_domain_boundary(mixed_tree):
    tree, c, _, _ = mixed_tree
    assert walk_in_direction(tree, c[0], axis=0, direction=0) is None
    assert walk_in_direction(tree, tree.root, axis=0, direction=1) is None
    assert list(leaves_in_direction(tree, c[0], axis=1, direction=0)) == []


def test_walk_across_parents(mixed_tree):
    tree, c, c1, _ = mixed_tree
    # c1[2] is the upper-left child of c[1]; above it lies c[3], a coarser leaf
    assert walk_in_direction(tree, c1[2], axis=1, direction=1) is c[3]
    # left of c1[0] is the coarser leaf c[0]
    assert walk_in_direction(tree, c1[0], axis=0, direction=0) is c[0]


def test_leaves_into_finer_side(mixed_tree):
    tree, c, c1, c10 = mixed_tree
    found = list(leaves_in_direction(tree, c[0], axis=0, direction=1))
    assert len(found) == len({x.index for x in found})
    assert {x.index for x in found} == {c10[0].index, c10[2].index, c1[2].index}


def test_leaves_into_coarser_side(mixed_tree):
    tree, c, _, c10 = mixed_tree
    found = list(leaves_in_direction(tree, c10[0], axis=0, direction=0))
    assert [x.index for x in found] == [c[0].index]


def test_leaves_on_face_of_leaf_is_itself(mixed_tree):
    tree, c, _, _ = mixed_tree
    assert list(leaves_on_face(tree, c[0], axis=0, direction=1)) == [c[0]]


def _brute_force_neighbors(tree, cell, axis, direction):
    other = 1 - axis
    plane = cell.p_max[axis] if direction == 1 else cell.p_min[axis]
    out = set()
    for leaf in tree.leaves():
        face = leaf.p_min[axis] if direction == 1 else leaf.p_max[axis]
        if not np.isclose(face, plane, rtol=0.0, atol=1e-12):
            continue
        overlap = min(leaf.p_max[other], cell.p_max[other]) - max(leaf.p_min[other], cell.p_min[other])
        if overlap > 1e-12:
            out.add(leaf.index)
    return out


def test_matches_brute_force_on_adaptive_tree(unit_circle):
    tree = build_tree(2, unit_circle, [-3, -3], [3, 3], 2, 400, np.array([0.006, 0.006]))
    depths = {c.depth for c in tree.leaves()}
    assert len(depths) > 1

    for leaf in tree.leaves():
        for axis in (0, 1):
            for direction in (0, 1):
                found = [x.index for x in leaves_in_direction(tree, leaf, axis, direction)]
                assert len(found) == len(set(found))
                assert all(tree[i].is_leaf for i in found)
                assert set(found) == _brute_force_neighbors(tree, leaf, axis, direction)
