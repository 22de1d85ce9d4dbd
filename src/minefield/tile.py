"""
Tile module for the Minesweeper field.

A tile is either a mine or a clue (a non-mine annotated with the number of
mines around it). What a tile holds is fixed when it is placed; only its
status (closed/open/marked) changes during play.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


# ============================================================================
# Constants
# ============================================================================

class TileKind(Enum):
    """What a tile holds."""

    MINE = auto()
    CLUE = auto()


class TileStatus(Enum):
    """Visibility status of a tile."""

    CLOSED = auto()
    OPEN = auto()
    MARKED = auto()


MAX_CLUE_VALUE = 8

_IMMUTABLE_FIELDS = ("kind", "value")


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass
class Tile:
    """
    Represents a single tile in the field.

    Attributes:
        kind: Mine or clue. Cannot be reassigned once set.
        value: Adjacent mine count for clues (0-8), always 0 for mines.
            Cannot be reassigned once set.
        status: Current visibility status.
    """

    kind: TileKind
    value: int = 0
    status: TileStatus = TileStatus.CLOSED

    def __post_init__(self) -> None:
        """Validate the payload for the tile kind."""
        if self.kind == TileKind.MINE and self.value != 0:
            raise ValueError("Mine tiles carry no clue value")
        if not 0 <= self.value <= MAX_CLUE_VALUE:
            raise ValueError(
                f"Clue value must be between 0 and {MAX_CLUE_VALUE}, "
                f"got {self.value}"
            )

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"Tile {name} cannot change once placed")
        super().__setattr__(name, value)

    @classmethod
    def mine(cls) -> "Tile":
        """Create a closed mine tile."""
        return cls(TileKind.MINE)

    @classmethod
    def clue(cls, value: int) -> "Tile":
        """Create a closed clue tile with the given adjacent mine count."""
        return cls(TileKind.CLUE, value)

    # ========================================================================
    # Status Transitions
    # ========================================================================

    def open(self) -> bool:
        """
        Open this tile.

        Returns:
            True if the tile was closed and is now open, False if it was
            already open or is marked.
        """
        if self.status != TileStatus.CLOSED:
            return False
        self.status = TileStatus.OPEN
        return True

    def toggle_mark(self) -> bool:
        """
        Toggle the mark on this tile.

        Returns:
            True if the mark was toggled, False if the tile is open.
        """
        if self.status == TileStatus.OPEN:
            return False
        if self.status == TileStatus.CLOSED:
            self.status = TileStatus.MARKED
        else:
            self.status = TileStatus.CLOSED
        return True

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_mine(self) -> bool:
        """Check if tile is a mine."""
        return self.kind == TileKind.MINE

    @property
    def is_clue(self) -> bool:
        """Check if tile is a clue."""
        return self.kind == TileKind.CLUE

    @property
    def is_closed(self) -> bool:
        """Check if tile is closed."""
        return self.status == TileStatus.CLOSED

    @property
    def is_open(self) -> bool:
        """Check if tile is open."""
        return self.status == TileStatus.OPEN

    @property
    def is_marked(self) -> bool:
        """Check if tile is marked."""
        return self.status == TileStatus.MARKED

    def to_observation(self) -> int:
        """
        Convert tile to an observation value for agents.

        Returns:
            -1: Closed tile
            -2: Marked tile
            0-8: Open clue with adjacent mine count
            9: Open mine (failed game)
        """
        if self.status == TileStatus.CLOSED:
            return -1
        if self.status == TileStatus.MARKED:
            return -2
        if self.is_mine:
            return 9
        return self.value

    @property
    def glyph(self) -> str:
        """Single character used by the debug rendering."""
        if self.status == TileStatus.CLOSED:
            return "-"
        if self.status == TileStatus.MARKED:
            return "M"
        if self.is_mine:
            return "X"
        return str(self.value)

    def __str__(self) -> str:
        return self.glyph
