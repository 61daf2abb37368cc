import argparse
import logging
import time
from collections import Counter
from typing import Dict, List

from tqdm import tqdm

from go_board import BLACK, WHITE, color_name
from go_config import GameConfig, add_config_arguments
from go_game import GoGame
from move_suggestion import (
    Difficulty, HeuristicSuggester, MoveSuggester, RandomSuggester, play_suggested_move,
)

SUGGESTERS = {
    'random': RandomSuggester,
    'heuristic': HeuristicSuggester,
}


class SelfPlayRunner:
    """Plays suggester against suggester through the rules engine"""

    def __init__(self, config: GameConfig, black: MoveSuggester, white: MoveSuggester):
        self.config = config
        self.players = {BLACK: black, WHITE: white}
        self.difficulty = Difficulty(config.difficulty)

    def play_game(self) -> GoGame:
        game = GoGame(self.config.board_size, komi=self.config.komi)
        max_moves = self.config.board_size * self.config.board_size * 2

        while not game.game_over and len(game.moves) < max_moves:
            play_suggested_move(game, self.players[game.current_player],
                                self.difficulty, self.config.max_suggestion_retries)

        # Long random games get cut off and scored as they stand
        if not game.game_over:
            game.end_game()
        return game

    def run(self, num_games: int) -> List[Dict]:
        results = []
        games_pbar = tqdm(range(num_games), desc="Self-play games", leave=True)
        for game_idx in games_pbar:
            start = time.time()
            game = self.play_game()
            results.append({
                'game': game_idx + 1,
                'winner': color_name(game.winner) if game.winner else 'draw',
                'result': game.result,
                'moves': len(game.moves),
                'score': game.final_score.to_dict() if game.final_score else None,
                'seconds': time.time() - start,
            })
            games_pbar.set_postfix(winner=results[-1]['winner'], moves=results[-1]['moves'])
        return results


def summarize(results: List[Dict]) -> str:
    wins = Counter(r['winner'] for r in results)
    avg_moves = sum(r['moves'] for r in results) / max(1, len(results))
    return (f"Games: {len(results)} | Black: {wins['black']} | White: {wins['white']} | "
            f"Draws: {wins['draw']} | Avg moves: {avg_moves:.1f}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Play suggester-vs-suggester games through the rules engine.')
    add_config_arguments(parser)
    parser.add_argument('--num-games', type=int, default=10, help='Number of games to play.')
    parser.add_argument('--black', choices=sorted(SUGGESTERS), default='heuristic', help='Suggester playing Black.')
    parser.add_argument('--white', choices=sorted(SUGGESTERS), default='random', help='Suggester playing White.')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for the suggesters.')
    args = parser.parse_args()

    config = GameConfig.from_args(args)
    logging.basicConfig(level=config.log_level, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    runner = SelfPlayRunner(config,
                            SUGGESTERS[args.black](seed=args.seed),
                            SUGGESTERS[args.white](seed=None if args.seed is None else args.seed + 1))
    print(f"Self-play on {config.board_size}x{config.board_size}: {args.black} (Black) vs {args.white} (White)")
    results = runner.run(args.num_games)
    print(summarize(results))
