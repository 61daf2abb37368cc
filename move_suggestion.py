"""
Move suggestion seam.

A suggester proposes a move for the side to play; the engine never trusts
it. Every suggestion is replayed through GoGame.play, illegal or malformed
answers are retried a bounded number of times, and when the attempts run
out the engine passes on the suggester's behalf.
"""
import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from go_board import EMPTY, Point, color_name, get_neighbors, opponent
from go_game import GoGame
from go_groups import find_group
from go_rules import MoveRejection, MoveResult, apply_move, legal_moves

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3

STAR_POINTS = {
    9: [(2, 2), (2, 6), (6, 2), (6, 6), (4, 4)],
    13: [(3, 3), (3, 9), (9, 3), (9, 9), (6, 6)],
    19: [(3, 3), (3, 9), (3, 15), (9, 3), (9, 9), (9, 15), (15, 3), (15, 9), (15, 15)],
}


class Difficulty(Enum):
    BEGINNER = 'beginner'
    SKILLED = 'skilled'
    PRO = 'pro'


class MoveSuggester(ABC):
    """Anything that can propose a move: returns (row, col), or None to pass"""

    @abstractmethod
    def suggest(self, board: np.ndarray, color: int, history: Sequence[bytes],
                difficulty: Difficulty) -> Optional[Point]:
        ...

    async def suggest_async(self, board: np.ndarray, color: int, history: Sequence[bytes],
                            difficulty: Difficulty) -> Optional[Point]:
        # Blocking suggesters run in a worker thread so the event loop stays free
        return await asyncio.to_thread(self.suggest, board, color, history, difficulty)


@dataclass
class SuggestionOutcome:
    point: Optional[Point]
    attempts: int
    forced_pass: bool = False
    result: Optional[MoveResult] = None

    @property
    def passed(self) -> bool:
        return self.point is None


def _as_point(suggestion) -> Optional[Point]:
    """Coerce a reply to (row, col) ints, or None if it is malformed"""
    if isinstance(suggestion, dict):
        suggestion = (suggestion.get('row'), suggestion.get('col'))
    try:
        row, col = suggestion
    except (TypeError, ValueError):
        return None
    if isinstance(row, bool) or isinstance(col, bool):
        return None
    if not isinstance(row, (int, np.integer)) or not isinstance(col, (int, np.integer)):
        return None
    return int(row), int(col)


def _inputs(game: GoGame):
    # Suggesters get copies; nothing they do can reach the session
    return game.board.copy(), list(game.history)


def _attempt(game: GoGame, color: int, suggestion, attempt: int) -> Optional[SuggestionOutcome]:
    """Validate one reply. Returns an outcome when the turn is settled"""
    if suggestion is None:
        game.pass_turn(color)
        return SuggestionOutcome(None, attempt)

    point = _as_point(suggestion)
    if point is None:
        logger.warning("Malformed suggestion %r for %s (attempt %d)",
                       suggestion, color_name(color), attempt)
        return None

    result = game.play(point[0], point[1], color)
    if result.valid:
        return SuggestionOutcome(point, attempt, result=result)

    logger.info("Suggested %s move %s rejected: %s (attempt %d)",
                color_name(color), point, result.rejection.value, attempt)
    return None


def _force_pass(game: GoGame, color: int, attempts: int) -> SuggestionOutcome:
    logger.warning("No valid suggestion for %s after %d attempts, passing",
                   color_name(color), attempts)
    game.pass_turn(color)
    return SuggestionOutcome(None, attempts, forced_pass=True)


def play_suggested_move(game: GoGame, suggester: MoveSuggester,
                        difficulty: Difficulty = Difficulty.SKILLED,
                        max_retries: int = DEFAULT_MAX_RETRIES) -> SuggestionOutcome:
    """Ask for a move, validate it, retry on rejection, pass when attempts run out"""
    if game.game_over:
        game.last_rejection = MoveRejection.GAME_OVER
        return SuggestionOutcome(None, 0, result=MoveResult.rejected(MoveRejection.GAME_OVER))

    difficulty = Difficulty(difficulty)
    color = game.current_player
    for attempt in range(1, max_retries + 1):
        board, history = _inputs(game)
        try:
            suggestion = suggester.suggest(board, color, history, difficulty)
        except Exception as e:
            logger.warning("Suggester failed for %s (attempt %d): %s",
                           color_name(color), attempt, e)
            continue
        outcome = _attempt(game, color, suggestion, attempt)
        if outcome is not None:
            return outcome

    return _force_pass(game, color, max_retries)


async def request_suggested_move(game: GoGame, suggester: MoveSuggester,
                                 difficulty: Difficulty = Difficulty.SKILLED,
                                 max_retries: int = DEFAULT_MAX_RETRIES,
                                 timeout: Optional[float] = None) -> SuggestionOutcome:
    """Async version of play_suggested_move.

    The session is not touched while a suggestion is pending. A timeout
    counts as a failed attempt. If the task is cancelled the engine passes
    for the waiting side and the cancellation propagates.
    """
    if game.game_over:
        game.last_rejection = MoveRejection.GAME_OVER
        return SuggestionOutcome(None, 0, result=MoveResult.rejected(MoveRejection.GAME_OVER))

    difficulty = Difficulty(difficulty)
    color = game.current_player
    attempt = 0
    try:
        for attempt in range(1, max_retries + 1):
            board, history = _inputs(game)
            try:
                suggestion = await asyncio.wait_for(
                    suggester.suggest_async(board, color, history, difficulty), timeout)
            except asyncio.TimeoutError:
                logger.warning("Suggester timed out for %s after %ss (attempt %d)",
                               color_name(color), timeout, attempt)
                continue
            except Exception as e:
                logger.warning("Suggester failed for %s (attempt %d): %s",
                               color_name(color), attempt, e)
                continue
            outcome = _attempt(game, color, suggestion, attempt)
            if outcome is not None:
                return outcome
    except asyncio.CancelledError:
        if not game.game_over and game.current_player == color:
            _force_pass(game, color, attempt)
        raise

    return _force_pass(game, color, max_retries)


def _is_own_eye(board: np.ndarray, row: int, col: int, color: int) -> bool:
    size = board.shape[0]
    return all(board[r, c] == color for r, c in get_neighbors(row, col, size))


def _playable(board: np.ndarray, color: int, history: Sequence[bytes]) -> List[Point]:
    last_snapshot = history[-1] if history else None
    return [p for p in legal_moves(board, color, last_snapshot)
            if not _is_own_eye(board, p[0], p[1], color)]


class RandomSuggester(MoveSuggester):
    """Uniformly chooses a legal move that does not fill its own eye; passes when none remain"""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def suggest(self, board, color, history, difficulty):
        moves = _playable(board, color, history)
        if not moves:
            return None
        return self.rng.choice(moves)


class HeuristicSuggester(MoveSuggester):
    """Cheap one-ply heuristics: star points early, then captures and contact, avoiding self-atari"""

    # How many of the best-ranked moves to pick from
    CHOICE_WIDTH = {
        Difficulty.BEGINNER: 6,
        Difficulty.SKILLED: 3,
        Difficulty.PRO: 1,
    }

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def suggest(self, board, color, history, difficulty):
        moves = _playable(board, color, history)
        if not moves:
            return None

        size = board.shape[0]
        if len(history) < 4:
            for point in STAR_POINTS.get(size, []):
                if point in moves:
                    return point

        last_snapshot = history[-1] if history else None
        scored = sorted(((self._score_move(board, move, color, last_snapshot), move) for move in moves),
                        reverse=True)
        width = self.CHOICE_WIDTH.get(difficulty, 1)
        return self.rng.choice(scored[:width])[1]

    def _score_move(self, board, move, color, last_snapshot) -> float:
        row, col = move
        size = board.shape[0]
        result = apply_move(board, row, col, color, last_snapshot)
        score = result.captures * 10.0

        enemy = opponent(color)
        for nr, nc in get_neighbors(row, col, size):
            value = board[nr, nc]
            if value == enemy:
                score += 1.0
            elif value == color:
                score += 0.5
            elif value == EMPTY:
                score += 0.2

        # Stones left in atari by the move are a liability
        after = result.board
        own_liberties = find_group(after, row, col).liberty_count
        if own_liberties <= 1:
            score -= 3.0

        center = size // 2
        score -= (abs(row - center) + abs(col - center)) * 0.1
        return score
