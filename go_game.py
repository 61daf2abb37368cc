"""
Game session: turn order, passes, termination and scoring at game end
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from go_board import (
    BLACK, WHITE, Point, board_to_list, color_from_name, color_name,
    new_board, opponent, render, snapshot,
)
from go_clock import GameClock
from go_rules import MoveRejection, MoveResult, apply_move
from go_scoring import ScoreBreakdown, score

logger = logging.getLogger(__name__)

Color = Union[int, str]


class GameStatus(Enum):
    AWAITING_MOVE = 'awaiting_move'
    TERMINAL = 'terminal'


@dataclass(frozen=True)
class Move:
    """One entry in the move log"""
    color: int
    point: Optional[Point] = None

    @property
    def is_pass(self) -> bool:
        return self.point is None

    def to_dict(self) -> Dict:
        if self.point is None:
            return {'color': color_name(self.color), 'pass': True}
        return {'color': color_name(self.color), 'row': self.point[0], 'col': self.point[1]}


def _as_color(color: Color) -> int:
    if isinstance(color, str):
        return color_from_name(color)
    if color not in (BLACK, WHITE):
        raise ValueError(f"Unknown color: {color!r}")
    return int(color)


class GoGame:
    """A single game session.

    The board is only replaced through play(); the history holds the
    serialized board from before each committed stone move and the move log
    records every move and pass in order.
    """

    def __init__(self, size: int = 9, komi: float = 0.0, clock: Optional[GameClock] = None):
        self.size = size
        self.board = new_board(size)
        self.komi = komi
        self.current_player = BLACK
        self.captures = {BLACK: 0, WHITE: 0}
        self.history: List[bytes] = []
        self.moves: List[Move] = []
        self.passes = 0
        self.game_over = False
        self.winner: Optional[int] = None
        self.result: Optional[str] = None
        self.final_score: Optional[ScoreBreakdown] = None
        self.last_move: Optional[Point] = None
        self.last_rejection: Optional[MoveRejection] = None
        self.clock = clock
        if self.clock is not None:
            self.clock.start(BLACK)

    @property
    def status(self) -> GameStatus:
        return GameStatus.TERMINAL if self.game_over else GameStatus.AWAITING_MOVE

    @property
    def last_snapshot(self) -> Optional[bytes]:
        return self.history[-1] if self.history else None

    def _check_turn(self, color: int) -> Optional[MoveRejection]:
        if self.game_over:
            return MoveRejection.GAME_OVER
        if color != self.current_player:
            return MoveRejection.WRONG_TURN
        return None

    def play(self, row: int, col: int, color: Optional[Color] = None) -> MoveResult:
        """Attempt a stone placement for color (default: the player to move)"""
        color_int = self.current_player if color is None else _as_color(color)

        problem = self._check_turn(color_int)
        if problem is not None:
            self.last_rejection = problem
            return MoveResult.rejected(problem)

        result = apply_move(self.board, row, col, color_int, self.last_snapshot)
        if not result.valid:
            self.last_rejection = result.rejection
            logger.info("Rejected %s at (%s, %s): %s",
                        color_name(color_int), row, col, result.rejection.value)
            return result

        row, col = int(row), int(col)
        self.history.append(snapshot(self.board))
        self.board = result.board
        self.captures[color_int] += result.captures
        self.moves.append(Move(color_int, (row, col)))
        self.last_move = (row, col)
        self.last_rejection = None
        self.passes = 0
        self.current_player = opponent(color_int)
        if self.clock is not None:
            self.clock.switch()

        logger.debug("%s plays (%d, %d), captures %d",
                     color_name(color_int), row, col, result.captures)
        return result

    def make_move(self, row: int, col: int, color: Optional[Color] = None) -> bool:
        return self.play(row, col, color).valid

    def pass_turn(self, color: Optional[Color] = None) -> bool:
        """Pass; the second consecutive pass ends and scores the game"""
        color_int = self.current_player if color is None else _as_color(color)

        problem = self._check_turn(color_int)
        if problem is not None:
            self.last_rejection = problem
            return False

        self.moves.append(Move(color_int))
        self.last_rejection = None
        self.passes += 1

        if self.passes >= 2:
            self._score_and_terminate()
        else:
            self.current_player = opponent(color_int)
            if self.clock is not None:
                self.clock.switch()

        return True

    def end_game(self) -> Optional[ScoreBreakdown]:
        """Score the final position and make the session terminal.

        A finished session keeps its result; the existing score (None after
        a resignation or timeout) is returned unchanged.
        """
        if self.game_over:
            self.last_rejection = MoveRejection.GAME_OVER
            return self.final_score
        return self._score_and_terminate()

    def _score_and_terminate(self) -> ScoreBreakdown:
        self.final_score = score(self.board, self.captures, komi=self.komi)
        self.winner = self.final_score.winner
        self.result = 'score' if self.winner is not None else 'draw'
        self._terminate()
        logger.info("Game over by score: %s", self.describe_result())
        return self.final_score

    def resign(self, color: Optional[Color] = None) -> bool:
        color_int = self.current_player if color is None else _as_color(color)
        return self._forced_win(opponent(color_int), 'resignation')

    def expire_clock(self, color: Optional[Color] = None) -> bool:
        """The given side ran out of time: the opponent wins without scoring"""
        color_int = self.current_player if color is None else _as_color(color)
        return self._forced_win(opponent(color_int), 'timeout')

    def check_clock(self, color: Optional[Color] = None) -> bool:
        """End the game if color (default: the player to move) has run out of time"""
        if self.clock is None or self.game_over:
            return False
        color_int = self.current_player if color is None else _as_color(color)
        if self.clock.expired(color_int):
            return self.expire_clock(color_int)
        return False

    def _forced_win(self, winner: int, reason: str) -> bool:
        if self.game_over:
            self.last_rejection = MoveRejection.GAME_OVER
            return False
        self.winner = winner
        self.result = reason
        self._terminate()
        logger.info("Game over by %s: %s wins", reason, color_name(winner))
        return True

    def _terminate(self) -> None:
        self.game_over = True
        if self.clock is not None:
            self.clock.stop()

    def describe_result(self) -> str:
        if not self.game_over:
            return f"{color_name(self.current_player).capitalize()}'s turn."
        if self.result in ('timeout', 'resignation'):
            loser = color_name(opponent(self.winner)).capitalize()
            reason = 'ran out of time' if self.result == 'timeout' else 'resigned'
            return f"{loser} {reason}. {color_name(self.winner).capitalize()} wins!"
        final = self.final_score
        text = f"Game Over. Final Score: Black {final.black_total} - White {final.white_total}. "
        if self.winner is None:
            return text + "It's a draw!"
        return text + f"{color_name(self.winner).capitalize()} wins!"

    def territory_map(self) -> Optional[np.ndarray]:
        if self.final_score is None:
            return None
        return self.final_score.territory

    def copy(self) -> 'GoGame':
        """Detached copy of the session (the clock is not shared)"""
        new_game = GoGame.__new__(GoGame)
        new_game.__dict__.update(self.__dict__)
        new_game.board = self.board.copy()
        new_game.captures = self.captures.copy()
        new_game.history = list(self.history)
        new_game.moves = list(self.moves)
        new_game.clock = None
        return new_game

    def get_state(self) -> Dict:
        """Presentation view of the session, JSON serializable"""
        territory = self.territory_map()
        return {
            'size': self.size,
            'board': board_to_list(self.board),
            'currentPlayer': color_name(self.current_player),
            'captures': {'black': int(self.captures[BLACK]), 'white': int(self.captures[WHITE])},
            'passes': self.passes,
            'moveNumber': len(self.moves),
            'gameOver': self.game_over,
            'winner': color_name(self.winner) if self.winner else None,
            'result': self.result,
            'lastMove': {'row': self.last_move[0], 'col': self.last_move[1]} if self.last_move else None,
            'lastRejection': self.last_rejection.value if self.last_rejection else None,
            'score': self.final_score.to_dict() if self.final_score else None,
            'territory': board_to_list(territory) if territory is not None else None,
            'message': self.describe_result(),
        }

    def __str__(self) -> str:
        return render(self.board, self.last_move)

    @classmethod
    def from_moves(cls, size: int, moves: Iterable[Move], komi: float = 0.0) -> 'GoGame':
        """Rebuild a session by replaying a move log"""
        game = cls(size, komi=komi)
        for number, move in enumerate(moves, start=1):
            if move.is_pass:
                ok = game.pass_turn(move.color)
            else:
                ok = game.play(move.point[0], move.point[1], move.color).valid
            if not ok:
                reason = game.last_rejection.value if game.last_rejection else 'unknown'
                raise ValueError(f"Move {number} ({move.to_dict()}) cannot be replayed: {reason}")
        return game
