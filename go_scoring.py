"""
End-of-game scoring with dead stone inference.

Territory is counted twice: a provisional pass decides which groups are
dead, those groups are lifted, and a final pass counts territory on the
cleaned board. The dead stone rule is a heuristic without lookahead and can
misjudge contested groups.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from go_board import EMPTY, BLACK, WHITE, Point, color_name, opponent
from go_groups import Group, all_groups, classify_empty_regions, ownership_map

logger = logging.getLogger(__name__)


@dataclass
class ScoreBreakdown:
    black_territory: int
    white_territory: int
    black_captures: int
    white_captures: int
    black_dead: int = 0
    white_dead: int = 0
    komi: float = 0.0
    territory: Optional[np.ndarray] = field(default=None, repr=False)

    @property
    def black_total(self) -> float:
        return self.black_territory + self.black_captures

    @property
    def white_total(self) -> float:
        return self.white_territory + self.white_captures + self.komi

    @property
    def winner(self) -> Optional[int]:
        if self.black_total > self.white_total:
            return BLACK
        if self.white_total > self.black_total:
            return WHITE
        return None

    def to_dict(self) -> Dict:
        return {
            'black': {
                'territory': self.black_territory,
                'captured': self.black_captures,
                'total': self.black_total,
            },
            'white': {
                'territory': self.white_territory,
                'captured': self.white_captures,
                'total': self.white_total,
            },
            'dead': {'black': self.black_dead, 'white': self.white_dead},
            'komi': self.komi,
            'winner': color_name(self.winner) if self.winner else None,
        }


def is_dead(group: Group, owners: Dict[Point, int]) -> bool:
    """A group is dead when every liberty sits in opponent territory.

    Neutral or friendly liberties keep it alive; no liberties at all is dead.
    """
    if group.liberty_count == 0:
        return True
    enemy = opponent(group.color)
    return all(owners.get(point, EMPTY) == enemy for point in group.liberties)


def find_dead_groups(board: np.ndarray, owners: Optional[Dict[Point, int]] = None) -> List[Group]:
    if owners is None:
        owners = classify_empty_regions(board)
    return [group for group in all_groups(board) if is_dead(group, owners)]


def remove_dead_stones(board: np.ndarray) -> Tuple[np.ndarray, Dict[int, int]]:
    """Copy of board with dead groups lifted, plus dead stone count per victim color"""
    cleaned = board.copy()
    dead = {BLACK: 0, WHITE: 0}
    for group in find_dead_groups(board):
        for r, c in group.stones:
            cleaned[r, c] = EMPTY
        dead[group.color] += len(group)
        logger.debug("Dead %s group of %d stones", color_name(group.color), len(group))
    return cleaned, dead


def score(board: np.ndarray, captures: Optional[Dict[int, int]] = None,
          komi: float = 0.0) -> ScoreBreakdown:
    """Final score: territory plus in-game captures plus opponent dead stones"""
    if captures is None:
        captures = {BLACK: 0, WHITE: 0}

    cleaned, dead = remove_dead_stones(board)
    territory = ownership_map(cleaned)

    result = ScoreBreakdown(
        black_territory=int(np.sum(territory == BLACK)),
        white_territory=int(np.sum(territory == WHITE)),
        black_captures=captures.get(BLACK, 0) + dead[WHITE],
        white_captures=captures.get(WHITE, 0) + dead[BLACK],
        black_dead=dead[BLACK],
        white_dead=dead[WHITE],
        komi=komi,
        territory=territory,
    )
    logger.info("Scored game: black %s, white %s", result.black_total, result.white_total)
    return result
