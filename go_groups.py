"""
Connectivity analysis: stone groups, liberties and empty-region ownership.

All functions take a board and return derived values; none of them mutate
the board they are given.
"""
from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

import numpy as np

from go_board import EMPTY, BLACK, WHITE, Point, get_neighbors


@dataclass(frozen=True)
class Group:
    """A maximal connected set of same-colored stones"""
    color: int
    stones: FrozenSet[Point]
    liberties: FrozenSet[Point]

    @property
    def liberty_count(self) -> int:
        return len(self.liberties)

    def __len__(self) -> int:
        return len(self.stones)


@dataclass(frozen=True)
class Region:
    """A maximal connected set of empty points and the colors bordering it"""
    points: FrozenSet[Point]
    borders: FrozenSet[int]

    @property
    def owner(self) -> int:
        # EMPTY means neutral: both colors, or no stones at all
        if len(self.borders) == 1:
            return next(iter(self.borders))
        return EMPTY


def find_group(board: np.ndarray, row: int, col: int) -> Group:
    """Breadth-first search from an occupied point.

    Liberties are collected as a set so an empty point touching the group
    from several sides counts once.
    """
    color = int(board[row, col])
    if color == EMPTY:
        raise ValueError(f"No stone at ({row}, {col})")

    size = board.shape[0]
    visited = np.zeros(board.shape, dtype=bool)
    visited[row, col] = True
    queue = deque([(row, col)])
    stones = []
    liberties = set()

    while queue:
        r, c = queue.popleft()
        stones.append((r, c))
        for nr, nc in get_neighbors(r, c, size):
            value = board[nr, nc]
            if value == EMPTY:
                liberties.add((nr, nc))
            elif value == color and not visited[nr, nc]:
                visited[nr, nc] = True
                queue.append((nr, nc))

    return Group(color, frozenset(stones), frozenset(liberties))


def group_liberties(board: np.ndarray, row: int, col: int) -> int:
    return find_group(board, row, col).liberty_count


def all_groups(board: np.ndarray) -> List[Group]:
    """Every stone group on the board, each reported once"""
    visited = np.zeros(board.shape, dtype=bool)
    groups = []
    for r, c in np.argwhere(board != EMPTY):
        if visited[r, c]:
            continue
        group = find_group(board, int(r), int(c))
        for gr, gc in group.stones:
            visited[gr, gc] = True
        groups.append(group)
    return groups


def find_regions(board: np.ndarray) -> List[Region]:
    """Flood-fill every empty region, sharing one visited mask across regions"""
    size = board.shape[0]
    visited = np.zeros(board.shape, dtype=bool)
    regions = []

    for start_r, start_c in np.argwhere(board == EMPTY):
        start = (int(start_r), int(start_c))
        if visited[start]:
            continue
        visited[start] = True
        queue = deque([start])
        points = []
        borders = set()

        while queue:
            r, c = queue.popleft()
            points.append((r, c))
            for nr, nc in get_neighbors(r, c, size):
                value = int(board[nr, nc])
                if value != EMPTY:
                    borders.add(value)
                elif not visited[nr, nc]:
                    visited[nr, nc] = True
                    queue.append((nr, nc))

        regions.append(Region(frozenset(points), frozenset(borders)))

    return regions


def classify_empty_regions(board: np.ndarray) -> Dict[Point, int]:
    """Map every empty point to BLACK, WHITE or EMPTY (neutral)"""
    owners = {}
    for region in find_regions(board):
        owner = region.owner
        for point in region.points:
            owners[point] = owner
    return owners


def ownership_map(board: np.ndarray) -> np.ndarray:
    """Territory owner per point as an int8 array; stones and neutral points are EMPTY"""
    owners = np.zeros(board.shape, dtype=np.int8)
    for (r, c), owner in classify_empty_regions(board).items():
        owners[r, c] = owner
    return owners


def territory_counts(board: np.ndarray) -> Tuple[int, int]:
    """(black territory, white territory)"""
    owners = ownership_map(board)
    return int(np.sum(owners == BLACK)), int(np.sum(owners == WHITE))
