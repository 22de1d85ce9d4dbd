"""
Minesweeper field engine.

Provides the playing field with mine placement, open/mark actions and the
win/loss state machine, plus a Gymnasium environment wrapper.
"""
from .errors import InvalidConfigurationError, MinefieldError, OutOfRangeError
from .tile import Tile, TileKind, TileStatus
from .field import Field, FieldConfig, GameState
from .environment import MinefieldEnv, make_vec_env

__version__ = "1.0.0"

__all__ = [
    "MinefieldError",
    "InvalidConfigurationError",
    "OutOfRangeError",
    "Tile",
    "TileKind",
    "TileStatus",
    "Field",
    "FieldConfig",
    "GameState",
    "MinefieldEnv",
    "make_vec_env",
]
