#!/usr/bin/env python3
"""
Play Go in the terminal: you are Black, a move suggester plays White.

Enter moves as a column letter and row number (e.g. C3) or as "row col".
Other commands: pass, resign, quit.
"""
import argparse
import asyncio
import logging
import re
import sys
from typing import Optional, Tuple

from go_board import BLACK, WHITE, render
from go_clock import GameClock
from go_config import GameConfig, add_config_arguments
from go_game import GoGame
from move_suggestion import Difficulty, HeuristicSuggester, RandomSuggester, request_suggested_move

COLUMNS = 'ABCDEFGHJKLMNOPQRST'


def parse_point(text: str) -> Optional[Tuple[int, int]]:
    """Parse 'C3' or '3 2' into (row, col); None if it is not a coordinate"""
    text = text.strip().upper()
    match = re.fullmatch(r'([A-HJ-T])\s*(\d{1,2})', text)
    if match:
        col = COLUMNS.index(match.group(1))
        return int(match.group(2)), col
    match = re.fullmatch(r'(\d{1,2})[\s,]+(\d{1,2})', text)
    if match:
        return int(match.group(1)), int(match.group(2))
    return None


def print_status(game: GoGame) -> None:
    print()
    print(render(game.board, game.last_move))
    print(f"Captures - Black: {game.captures[BLACK]}  White: {game.captures[WHITE]}")
    if game.clock is not None:
        print(f"Clock - Black: {game.clock.remaining(BLACK):.0f}s  White: {game.clock.remaining(WHITE):.0f}s")
    print(game.describe_result())


def print_final(game: GoGame) -> None:
    print_status(game)
    if game.final_score is not None:
        s = game.final_score
        print(f"Black: {s.black_total} ({s.black_territory}T + {s.black_captures}C)")
        print(f"White: {s.white_total} ({s.white_territory}T + {s.white_captures}C)")


async def run(config: GameConfig, suggester_name: str, seed: Optional[int]) -> GoGame:
    clock = GameClock.from_setting(config.time_setting)
    game = GoGame(config.board_size, komi=config.komi, clock=clock)
    suggester = (HeuristicSuggester if suggester_name == 'heuristic' else RandomSuggester)(seed=seed)
    difficulty = Difficulty(config.difficulty)
    loop = asyncio.get_running_loop()

    while not game.game_over:
        print_status(game)
        if game.check_clock():
            break
        if game.current_player == WHITE:
            print("AI is thinking...")
            outcome = await request_suggested_move(game, suggester, difficulty,
                                                   config.max_suggestion_retries,
                                                   config.suggestion_timeout)
            print("White passes." if outcome.passed else f"White plays {outcome.point}.")
            # The turn is already Black's; White's thinking time was charged on the switch
            game.check_clock(WHITE)
            continue

        line = await loop.run_in_executor(None, input, "Your move: ")
        if game.check_clock():
            break
        command = line.strip().lower()
        if command in ('quit', 'exit'):
            break
        if command == 'pass':
            game.pass_turn()
            continue
        if command == 'resign':
            game.resign()
            continue

        point = parse_point(line)
        if point is None:
            print("Enter a move like C3, '2 3', pass, resign or quit.")
            continue
        result = game.play(*point)
        if not result.valid:
            print(result.message)
        elif result.captures:
            print(f"Captured {result.captures} stone(s)!")

    return game


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Play Go against a move suggester.')
    add_config_arguments(parser)
    parser.add_argument('--suggester', choices=['heuristic', 'random'], default='heuristic', help='Who plays White.')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for the suggester.')
    args = parser.parse_args()

    config = GameConfig.from_args(args)
    logging.basicConfig(level=config.log_level, format='%(levelname)s %(name)s: %(message)s')

    try:
        final = asyncio.run(run(config, args.suggester, args.seed))
    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted")
        sys.exit(0)
    print_final(final)
