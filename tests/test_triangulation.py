"""
Dual triangulation: triangle counts on uniform grids, crack-free fans across
depth changes, chain consistency and the hanging-edge table.
"""

import numpy as np
import pytest

from isoplot.errors import ConfigurationError
from isoplot.geometry import FieldSample, as_point, vertices_from_extremes
from isoplot.quadtree import CellTree, build_tree
from isoplot.triangulation import Triangulator, TriangleMesh, triangulate

TOL = np.array([0.006, 0.006])


def _signed_area(tri):
    a, b, c = (v.pos for v in tri.vertices)
    return 0.5 * ((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]))


@pytest.mark.parametrize("depth, expected", [(1, 16), (2, 96), (3, 448)])
def test_uniform_grid_triangle_count(depth, expected):
    # n x n leaves have 2 n (n - 1) adjacent pairs, four triangles each
    tree = build_tree(2, lambda p: 5.0, [0, 0], [1, 1], depth, 1, TOL)
    mesh = triangulate(tree, lambda p: 5.0, TOL)
    assert len(mesh) == expected
    assert mesh.linked_count == 0


def test_rejects_non_2d_tree():
    tree = build_tree(3, lambda p: 1.0, [0, 0, 0], [1, 1, 1], 1, 10, np.array([0.01] * 3))
    with pytest.raises(ConfigurationError):
        Triangulator(tree, lambda p: 1.0, np.array([0.01] * 3))


def test_fans_have_consistent_winding(unit_circle):
    tree = build_tree(2, unit_circle, [-3, -3], [3, 3], 2, 2000, TOL)
    mesh = triangulate(tree, unit_circle, TOL)
    areas = np.array([_signed_area(t) for t in mesh])
    assert np.all(areas <= 1e-15)


def test_triangles_cover_interior_without_cracks():
    # two leaves of different depth: the fans must use the finer boundary vertices
    fn = lambda p: 1.0
    tree = CellTree(2)
    root = tree.add_root(vertices_from_extremes(2, [0, 0], [4, 4], fn))
    children = tree.split(root, fn)
    tree.split(children[1], fn)
    mesh = triangulate(tree, fn, TOL)

    # the shared edge x=2, y in [0, 2] is split at y=1 on the fine side
    touching = [
        t for t in mesh
        if any(np.allclose(v.pos, [2.0, 1.0]) for v in t.vertices)
    ]
    assert touching


def test_chain_links_are_mutually_consistent(unit_circle):
    tree = build_tree(2, unit_circle, [-3, -3], [3, 3], 3, 10_000, TOL)
    mesh = triangulate(tree, unit_circle, TOL)
    linked = [t for t in mesh if t.next is not None]
    assert linked
    for t in linked:
        assert mesh[t.next].prev == t.index
        assert t.next_bisect_point is not None
        assert abs(t.next_bisect_point.val) < TOL[0]
    incoming = [t.next for t in linked]
    assert len(incoming) == len(set(incoming))


def test_hanging_table_is_cleared(unit_circle):
    tree = build_tree(2, unit_circle, [-3, -3], [3, 3], 3, 10_000, TOL)
    tri = Triangulator(tree, unit_circle, TOL)
    tri.triangulate()
    assert tri.hanging_next == {}


def test_edge_key_ignores_endpoint_order(unit_circle):
    tree = build_tree(2, unit_circle, [-3, -3], [3, 3], 1, 10, TOL)
    tri = Triangulator(tree, unit_circle, TOL)
    a = FieldSample(as_point([0.75, -1.5]), 1.0)
    b = FieldSample(as_point([1.5, -0.75]), -1.0)
    assert tri.edge_key(a, b) == tri.edge_key(b, a)
    c = FieldSample(as_point([1.5, -1.5]), -1.0)
    assert tri.edge_key(a, b) != tri.edge_key(a, c)


def test_mesh_link_sets_both_directions():
    mesh = TriangleMesh()
    s = FieldSample(as_point([0.0, 0.0]), 0.0)
    t0 = mesh.add(s, s, s)
    t1 = mesh.add(s, s, s)
    mesh.link(t0, t1, s)
    assert mesh.next_of(t0) is t1
    assert mesh.prev_of(t1) is t0
    assert t0.next_bisect_point is s
    assert mesh.prev_of(t0) is None


def test_face_duals_are_evaluated_once_per_leaf(counting):
    field = counting(lambda p: 5.0)
    tree = build_tree(2, field, [0, 0], [1, 1], 1, 1, TOL)
    field.calls = 0

    triangulate(tree, field, TOL)
    # 4 face duals; each of the 4 shared edges takes two probes and a midpoint
    assert field.calls == 4 + 3 * 4
