"""
Tests for the move suggestion seam: validation, bounded retries, forced
passes and the async request path.
"""

import asyncio
import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from go_board import EMPTY, BLACK, WHITE, board_from_rows
from go_game import GameStatus, GoGame, Move
from go_rules import MoveRejection, is_legal_move
from move_suggestion import (
    Difficulty, HeuristicSuggester, MoveSuggester, RandomSuggester,
    play_suggested_move, request_suggested_move,
)


class ScriptedSuggester(MoveSuggester):
    """Returns queued answers in order; exceptions in the queue are raised"""

    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = []

    def suggest(self, board, color, history, difficulty):
        self.calls.append((board.copy(), color, list(history), difficulty))
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


class SlowSuggester(MoveSuggester):
    def __init__(self, delay):
        self.delay = delay
        self.started = None

    def suggest(self, board, color, history, difficulty):
        return (0, 0)

    async def suggest_async(self, board, color, history, difficulty):
        self.started.set()
        await asyncio.sleep(self.delay)
        return (0, 0)


@pytest.fixture
def white_to_move():
    game = GoGame(9)
    game.play(4, 4)
    return game


class TestPlaySuggestedMove:

    @pytest.mark.unit
    def test_valid_suggestion_is_played(self, white_to_move):
        suggester = ScriptedSuggester([(3, 3)])
        outcome = play_suggested_move(white_to_move, suggester)
        assert outcome.point == (3, 3)
        assert outcome.attempts == 1
        assert not outcome.forced_pass
        assert white_to_move.board[3, 3] == WHITE
        assert white_to_move.current_player == BLACK

    @pytest.mark.unit
    def test_suggester_receives_context(self, white_to_move):
        suggester = ScriptedSuggester([(3, 3)])
        play_suggested_move(white_to_move, suggester, Difficulty.PRO)
        board, color, history, difficulty = suggester.calls[0]
        assert board[4, 4] == BLACK
        assert color == WHITE
        assert len(history) == 1
        assert difficulty == Difficulty.PRO

    @pytest.mark.unit
    def test_difficulty_tag_accepted_as_string(self, white_to_move):
        suggester = ScriptedSuggester([(3, 3)])
        play_suggested_move(white_to_move, suggester, 'beginner')
        assert suggester.calls[0][3] == Difficulty.BEGINNER

    @pytest.mark.unit
    def test_rejected_suggestion_is_retried(self, white_to_move):
        suggester = ScriptedSuggester([(4, 4), (3, 3)])
        outcome = play_suggested_move(white_to_move, suggester)
        assert outcome.point == (3, 3)
        assert outcome.attempts == 2
        assert len(suggester.calls) == 2

    @pytest.mark.unit
    def test_retries_are_bounded_then_pass(self, white_to_move):
        suggester = ScriptedSuggester([(4, 4)] * 10)
        outcome = play_suggested_move(white_to_move, suggester, max_retries=3)
        assert outcome.forced_pass
        assert outcome.passed
        assert len(suggester.calls) == 3
        assert white_to_move.passes == 1
        assert white_to_move.moves[-1] == Move(WHITE)
        assert white_to_move.current_player == BLACK

    @pytest.mark.unit
    def test_suggester_errors_degrade_to_pass(self, white_to_move):
        suggester = ScriptedSuggester([RuntimeError("service down")] * 3)
        outcome = play_suggested_move(white_to_move, suggester)
        assert outcome.forced_pass
        assert white_to_move.passes == 1

    @pytest.mark.unit
    def test_malformed_answers_degrade_to_pass(self, white_to_move):
        suggester = ScriptedSuggester(['D4', (1,), {'row': 'x', 'col': 2}])
        board = white_to_move.board.copy()
        outcome = play_suggested_move(white_to_move, suggester)
        assert outcome.forced_pass
        assert np.array_equal(board, white_to_move.board)

    @pytest.mark.unit
    def test_dict_answer_accepted(self, white_to_move):
        outcome = play_suggested_move(white_to_move, ScriptedSuggester([{'row': 2, 'col': 6}]))
        assert outcome.point == (2, 6)

    @pytest.mark.unit
    def test_pass_answer_is_a_pass(self, white_to_move):
        outcome = play_suggested_move(white_to_move, ScriptedSuggester([None]))
        assert outcome.passed
        assert not outcome.forced_pass
        assert outcome.attempts == 1
        assert white_to_move.passes == 1

    @pytest.mark.unit
    def test_suggester_cannot_touch_session_board(self, white_to_move):
        class Vandal(MoveSuggester):
            def suggest(self, board, color, history, difficulty):
                board[:] = WHITE
                history.clear()
                return (0, 0)

        play_suggested_move(white_to_move, Vandal())
        assert white_to_move.board[4, 4] == BLACK
        assert white_to_move.board[0, 0] == WHITE
        assert len(white_to_move.history) == 2

    @pytest.mark.unit
    def test_terminal_session_is_not_asked(self):
        game = GoGame(9)
        game.pass_turn()
        game.pass_turn()
        suggester = ScriptedSuggester([(0, 0)])
        outcome = play_suggested_move(game, suggester)
        assert outcome.result.rejection == MoveRejection.GAME_OVER
        assert suggester.calls == []

    @pytest.mark.unit
    def test_forced_pass_can_end_game(self, white_to_move):
        white_to_move.pass_turn()  # White passes, Black to move
        outcome = play_suggested_move(white_to_move, ScriptedSuggester([(4, 4)] * 3))
        assert outcome.forced_pass
        assert white_to_move.game_over


class TestRequestSuggestedMove:

    @pytest.mark.unit
    def test_async_valid_suggestion(self, white_to_move):
        outcome = asyncio.run(request_suggested_move(white_to_move, ScriptedSuggester([(3, 3)])))
        assert outcome.point == (3, 3)
        assert white_to_move.board[3, 3] == WHITE

    @pytest.mark.unit
    def test_timeouts_degrade_to_pass(self, white_to_move):
        suggester = SlowSuggester(delay=5.0)

        async def scenario():
            suggester.started = asyncio.Event()
            return await request_suggested_move(white_to_move, suggester, max_retries=2, timeout=0.01)

        outcome = asyncio.run(scenario())
        assert outcome.forced_pass
        assert outcome.attempts == 2
        assert white_to_move.passes == 1

    @pytest.mark.unit
    def test_session_untouched_while_pending(self, white_to_move):
        suggester = SlowSuggester(delay=0.05)

        async def scenario():
            suggester.started = asyncio.Event()
            task = asyncio.create_task(request_suggested_move(white_to_move, suggester))
            await suggester.started.wait()
            assert white_to_move.status == GameStatus.AWAITING_MOVE
            assert white_to_move.current_player == WHITE
            assert white_to_move.board[0, 0] == EMPTY
            assert len(white_to_move.moves) == 1
            return await task

        outcome = asyncio.run(scenario())
        assert outcome.point == (0, 0)
        assert white_to_move.board[0, 0] == WHITE

    @pytest.mark.unit
    def test_cancellation_is_a_pass(self, white_to_move):
        suggester = SlowSuggester(delay=5.0)

        async def scenario():
            suggester.started = asyncio.Event()
            task = asyncio.create_task(request_suggested_move(white_to_move, suggester))
            await suggester.started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert white_to_move.passes == 1
        assert white_to_move.current_player == BLACK
        assert white_to_move.board[0, 0] == EMPTY
        assert not white_to_move.game_over


class TestBundledSuggesters:

    @pytest.mark.unit
    @pytest.mark.parametrize('suggester_cls', [RandomSuggester, HeuristicSuggester])
    def test_suggestions_are_legal(self, suggester_cls, ko_position):
        suggester = suggester_cls(seed=7)
        for difficulty in Difficulty:
            point = suggester.suggest(ko_position, WHITE, [b''] * 4, difficulty)
            assert point is not None
            assert is_legal_move(ko_position, point[0], point[1], WHITE)

    @pytest.mark.unit
    def test_random_suggester_passes_when_only_eyes_remain(self):
        board = np.full((9, 9), BLACK, dtype=np.int8)
        board[0, 0] = EMPTY
        board[8, 8] = EMPTY
        assert RandomSuggester(seed=1).suggest(board, BLACK, [], Difficulty.SKILLED) is None

    @pytest.mark.unit
    def test_heuristic_opens_on_star_point(self, empty_board_9x9):
        point = HeuristicSuggester(seed=1).suggest(empty_board_9x9, BLACK, [], Difficulty.PRO)
        assert point == (2, 2)

    @pytest.mark.unit
    def test_heuristic_takes_capture(self, capture_position):
        point = HeuristicSuggester(seed=1).suggest(capture_position, WHITE, [b''] * 4, Difficulty.PRO)
        assert point == (4, 5)
