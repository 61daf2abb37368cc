"""
Board representation for the Go rules engine
"""
import numpy as np
from typing import List, Tuple, Optional

# Constants for board representation
EMPTY = 0
BLACK = 1
WHITE = 2

VALID_SIZES = (9, 13, 19)

COLOR_NAMES = {BLACK: 'black', WHITE: 'white'}
_SYMBOLS = {EMPTY: '.', BLACK: 'B', WHITE: 'W'}

Point = Tuple[int, int]


def opponent(color: int) -> int:
    """Get opponent color"""
    return WHITE if color == BLACK else BLACK


def color_from_name(name: str) -> int:
    """Convert 'black'/'white' (any case, or B/W) to a color constant"""
    key = str(name).strip().lower()
    if key in ('black', 'b'):
        return BLACK
    if key in ('white', 'w'):
        return WHITE
    raise ValueError(f"Unknown color: {name!r}")


def color_name(color: int) -> Optional[str]:
    return COLOR_NAMES.get(int(color))


def new_board(size: int) -> np.ndarray:
    """Create an empty board, rejecting unsupported sizes"""
    if size not in VALID_SIZES:
        raise ValueError(f"Board size must be one of {VALID_SIZES}, got {size}")
    return np.zeros((size, size), dtype=np.int8)


def on_board(size: int, row: int, col: int) -> bool:
    return 0 <= row < size and 0 <= col < size


def get_neighbors(row: int, col: int, size: int) -> List[Point]:
    """Orthogonal neighbors clipped at the board edge"""
    neighbors = []
    if row > 0:
        neighbors.append((row - 1, col))
    if row < size - 1:
        neighbors.append((row + 1, col))
    if col > 0:
        neighbors.append((row, col - 1))
    if col < size - 1:
        neighbors.append((row, col + 1))
    return neighbors


def snapshot(board: np.ndarray) -> bytes:
    """Serialize a board for positional comparison"""
    return board.tobytes()


def board_from_rows(rows: List[str]) -> np.ndarray:
    """Build a board from text rows using B/W/. (spaces ignored).

    Handy for setting up positions in tests and replays.
    """
    cleaned = [r.replace(' ', '') for r in rows]
    board = new_board(len(cleaned))
    for r, line in enumerate(cleaned):
        if len(line) != len(cleaned):
            raise ValueError(f"Row {r} has {len(line)} points, expected {len(cleaned)}")
        for c, ch in enumerate(line.upper()):
            if ch == 'B' or ch == 'X':
                board[r, c] = BLACK
            elif ch == 'W' or ch == 'O':
                board[r, c] = WHITE
            elif ch != '.':
                raise ValueError(f"Unknown board symbol {ch!r} at ({r}, {c})")
    return board


def board_to_list(board: np.ndarray) -> List[List[Optional[str]]]:
    """Nested list of 'black'/'white'/None, JSON serializable"""
    return [[color_name(v) for v in row] for row in board]


def render(board: np.ndarray, last_move: Optional[Point] = None) -> str:
    """ASCII rendering with column letters and row numbers"""
    size = board.shape[0]
    letters = 'ABCDEFGHJKLMNOPQRST'[:size]
    lines = ['   ' + ' '.join(letters)]
    for r in range(size):
        cells = []
        for c in range(size):
            symbol = _SYMBOLS[int(board[r, c])]
            if last_move == (r, c):
                symbol = symbol.lower()
            cells.append(symbol)
        lines.append(f"{r:2d} " + ' '.join(cells))
    return '\n'.join(lines)
