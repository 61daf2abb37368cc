"""
Move validation and application.

apply_move never touches the board it is given: it works on a copy and only
returns that copy when every check passes.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from go_board import EMPTY, Point, get_neighbors, on_board, opponent, snapshot
from go_groups import find_group


class MoveRejection(Enum):
    SPOT_TAKEN = 'spot_taken'
    SUICIDE = 'suicide'
    KO = 'ko'
    GAME_OVER = 'game_over'
    WRONG_TURN = 'wrong_turn'


REJECTION_MESSAGES = {
    MoveRejection.SPOT_TAKEN: "Invalid move: Spot is taken.",
    MoveRejection.SUICIDE: "Illegal suicide move.",
    MoveRejection.KO: "Illegal Ko move.",
    MoveRejection.GAME_OVER: "The game is over.",
    MoveRejection.WRONG_TURN: "It is not your turn.",
}


@dataclass
class MoveResult:
    """Result of attempting a move"""
    valid: bool
    rejection: Optional[MoveRejection] = None
    captures: int = 0
    board: Optional[np.ndarray] = None
    captured_stones: tuple = ()

    @property
    def message(self) -> str:
        if self.rejection is None:
            return ""
        return REJECTION_MESSAGES[self.rejection]

    @classmethod
    def rejected(cls, rejection: MoveRejection) -> 'MoveResult':
        return cls(False, rejection)

    def __bool__(self) -> bool:
        return self.valid


def _is_index(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def apply_move(board: np.ndarray, row: int, col: int, color: int,
               last_snapshot: Optional[bytes] = None) -> MoveResult:
    """Place a stone, resolve captures and check suicide and ko.

    last_snapshot is the serialized board as it stood before the previous
    move; a result identical to it is a ko violation.
    """
    size = board.shape[0]
    if not (_is_index(row) and _is_index(col)):
        return MoveResult.rejected(MoveRejection.SPOT_TAKEN)
    if not on_board(size, row, col) or board[row, col] != EMPTY:
        return MoveResult.rejected(MoveRejection.SPOT_TAKEN)

    new_board = board.copy()
    new_board[row, col] = color

    # Captures are resolved against the post-placement board
    enemy = opponent(color)
    captured = []
    for nr, nc in get_neighbors(row, col, size):
        if new_board[nr, nc] != enemy:
            continue
        group = find_group(new_board, nr, nc)
        if group.liberty_count == 0:
            for gr, gc in group.stones:
                new_board[gr, gc] = EMPTY
            captured.extend(sorted(group.stones))

    if not captured and find_group(new_board, row, col).liberty_count == 0:
        return MoveResult.rejected(MoveRejection.SUICIDE)

    if last_snapshot is not None and snapshot(new_board) == last_snapshot:
        return MoveResult.rejected(MoveRejection.KO)

    return MoveResult(True, captures=len(captured), board=new_board,
                      captured_stones=tuple(captured))


def is_legal_move(board: np.ndarray, row: int, col: int, color: int,
                  last_snapshot: Optional[bytes] = None) -> bool:
    return apply_move(board, row, col, color, last_snapshot).valid


def legal_moves(board: np.ndarray, color: int,
                last_snapshot: Optional[bytes] = None) -> List[Point]:
    """Get all legal placements for color"""
    moves = []
    for r, c in np.argwhere(board == EMPTY):
        if is_legal_move(board, int(r), int(c), color, last_snapshot):
            moves.append((int(r), int(c)))
    return moves
