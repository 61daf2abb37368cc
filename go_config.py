"""
Configuration for games and the command line scripts.

Values come from defaults, then GO_* environment variables, then command
line options.
"""
import argparse
import os
from dataclasses import dataclass, fields
from typing import Optional

from go_board import VALID_SIZES
from go_clock import TIME_SETTINGS

DIFFICULTIES = ('beginner', 'skilled', 'pro')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

ENV_VARS = {
    'board_size': 'GO_BOARD_SIZE',
    'difficulty': 'GO_DIFFICULTY',
    'komi': 'GO_KOMI',
    'max_suggestion_retries': 'GO_MAX_RETRIES',
    'suggestion_timeout': 'GO_SUGGESTION_TIMEOUT',
    'time_setting': 'GO_TIME_SETTING',
    'log_level': 'GO_LOG_LEVEL',
}


@dataclass
class GameConfig:
    board_size: int = 9
    difficulty: str = 'skilled'
    komi: float = 0.0
    max_suggestion_retries: int = 3
    suggestion_timeout: float = 30.0
    time_setting: Optional[str] = None
    log_level: str = 'INFO'

    def validate(self) -> 'GameConfig':
        if self.board_size not in VALID_SIZES:
            raise ValueError(f"Board size must be one of {VALID_SIZES}, got {self.board_size}")
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"Difficulty must be one of {DIFFICULTIES}, got {self.difficulty!r}")
        if self.komi < 0:
            raise ValueError(f"Komi cannot be negative, got {self.komi}")
        if self.max_suggestion_retries < 1:
            raise ValueError("At least one suggestion attempt is required")
        if self.suggestion_timeout <= 0:
            raise ValueError("Suggestion timeout must be positive")
        if self.time_setting is not None and self.time_setting not in TIME_SETTINGS:
            raise ValueError(f"Time setting must be one of {sorted(TIME_SETTINGS)} or unset")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {LOG_LEVELS}")
        return self

    @classmethod
    def from_env(cls, environ=None) -> 'GameConfig':
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(ENV_VARS[f.name])
            if raw is None or raw == '':
                continue
            values[f.name] = _convert(f.name, raw)
        return cls(**values).validate()

    @classmethod
    def from_args(cls, args: argparse.Namespace, environ=None) -> 'GameConfig':
        """Environment first, then any option given on the command line"""
        config = cls.from_env(environ)
        for f in fields(cls):
            value = getattr(args, f.name, None)
            if value is not None:
                setattr(config, f.name, value)
        return config.validate()


def _convert(name: str, raw: str):
    if name in ('board_size', 'max_suggestion_retries'):
        return int(raw)
    if name in ('komi', 'suggestion_timeout'):
        return float(raw)
    if name == 'time_setting' and raw.lower() in ('none', 'unlimited'):
        return None
    if name == 'log_level':
        return raw.upper()
    return raw


def add_config_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    # Defaults stay None so unset options fall through to the environment
    parser.add_argument('--board-size', type=int, choices=VALID_SIZES, help='Size of the Go board (9, 13 or 19).')
    parser.add_argument('--difficulty', choices=DIFFICULTIES, help='Difficulty tag passed to the move suggester.')
    parser.add_argument('--komi', type=float, help='Points added to White at scoring time.')
    parser.add_argument('--max-suggestion-retries', type=int, help='Suggestions tried before the engine forces a pass.')
    parser.add_argument('--suggestion-timeout', type=float, help='Seconds to wait for one suggestion.')
    parser.add_argument('--time-setting', choices=sorted(TIME_SETTINGS), help='Per-player clock; untimed if omitted.')
    parser.add_argument('--log-level', type=str.upper, choices=LOG_LEVELS, help='Logging level.')
    return parser
