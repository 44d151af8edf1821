from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

import numpy as np

from isoplot.geometry import FieldSample

if TYPE_CHECKING:
    from isoplot.geometry import Point
    from isoplot.protocols import ScalarField



@dataclass(slots=True)
class Cell:
    """Axis-aligned hyper-rectangle stored in a CellTree arena.

    vertices:
        2**dim corner samples; corner i takes coordinate d from the max bound
        iff bit d of i is set.
    parent:
        Arena index of the parent, None for the root.
    child_direction:
        Which child of the parent this is, in [0, 2**dim).
    children:
        Empty for a leaf, otherwise exactly 2**dim arena indices. Set once.
    """

    index: int
    dim: int
    vertices: tuple[FieldSample, ...]
    depth: int
    parent: int | None = None
    child_direction: int = 0
    children: tuple[int, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def p_min(self) -> Point:
        return self.vertices[0].pos

    @property
    def p_max(self) -> Point:
        return self.vertices[-1].pos

    @property
    def span(self) -> Point:
        return self.p_max - self.p_min

    def values(self) -> np.ndarray:
        return np.fromiter((v.val for v in self.vertices), dtype=np.float64, count=len(self.vertices))

    def face_vertices(self, axis: int, direction: int) -> tuple[FieldSample, ...]:
        """Corners lying on the face at the min (0) or max (1) side of axis."""
        m = 1 << axis
        return tuple(v for i, v in enumerate(self.vertices) if bool(i & m) == (direction == 1))

    def contains(self, p: Point) -> bool:
        return bool(np.all(p >= self.p_min) and np.all(p <= self.p_max))


class CellTree:
    """Arena owning every cell of one quadtree; index 0 is the root."""

    def __init__(self, dim: int) -> None:
        self.dim = dim
        self.cells: list[Cell] = []
        self.evaluations = 0

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    @property
    def root(self) -> Cell:
        return self.cells[0]

    @property
    def branching_factor(self) -> int:
        return 1 << self.dim

    def add_root(self, vertices: list[FieldSample]) -> Cell:
        if self.cells:
            msg = "Tree already has a root"
            raise RuntimeError(msg)
        if len(vertices) != self.branching_factor:
            msg = f"Root needs {self.branching_factor} corners, got {len(vertices)}"
            raise ValueError(msg)
        self.evaluations += len(vertices)
        root = Cell(index=0, dim=self.dim, vertices=tuple(vertices), depth=0)
        self.cells.append(root)
        return root

    def parent(self, cell: Cell) -> Cell | None:
        if cell.parent is None:
            return None
        return self.cells[cell.parent]

    def child(self, cell: Cell, direction: int) -> Cell:
        return self.cells[cell.children[direction]]

    def children(self, cell: Cell) -> list[Cell]:
        return [self.cells[i] for i in cell.children]

    def split(self, cell: Cell, fn: ScalarField) -> list[Cell]:
        """Subdivide cell into 2**dim equal children.

        Corners of all children lie on a 3**dim lattice over the parent; the
        parent's own corners are reused and only the new lattice points are
        evaluated.
        """
        if cell.children:
            msg = f"Cell {cell.index} already split"
            raise RuntimeError(msg)

        dim = self.dim
        lo = cell.p_min
        hi = cell.p_max
        mid = (lo + hi) / 2.0
        axis_coords = (lo, mid, hi)

        lattice: dict[tuple[int, ...], FieldSample] = {}
        for i, v in enumerate(cell.vertices):
            lattice[tuple(2 * ((i >> d) & 1) for d in range(dim))] = v

        def sample(key: tuple[int, ...]) -> FieldSample:
            found = lattice.get(key)
            if found is None:
                coords = [axis_coords[k][d] for d, k in enumerate(key)]
                found = FieldSample.at(coords, fn)
                self.evaluations += 1
                lattice[key] = found
            return found

        n = self.branching_factor
        first = len(self.cells)
        new_cells: list[Cell] = []
        for i in range(n):
            vertices = tuple(
                sample(tuple(((i >> d) & 1) + ((j >> d) & 1) for d in range(dim)))
                for j in range(n)
            )
            child = Cell(
                index=first + i,
                dim=dim,
                vertices=vertices,
                depth=cell.depth + 1,
                parent=cell.index,
                child_direction=i,
            )
            new_cells.append(child)

        self.cells.extend(new_cells)
        cell.children = tuple(c.index for c in new_cells)
        return new_cells

    def leaves(self) -> Iterator[Cell]:
        return (c for c in self.cells if c.is_leaf)

    def max_depth(self) -> int:
        return max(c.depth for c in self.cells)

    def find_leaf(self, p: Point) -> Cell | None:
        """Descend from the root to the leaf containing p."""
        cell = self.root
        if not cell.contains(p):
            return None
        while cell.children:
            mid = (cell.p_min + cell.p_max) / 2.0
            direction = sum(1 << d for d in range(self.dim) if p[d] >= mid[d])
            cell = self.child(cell, direction)
        return cell
