"""
Field module for Minesweeper.

Implements the playing field: mine placement, clue computation, the open and
mark actions, flood-fill opening of empty regions and the win/loss state
machine.
"""
import logging
import random
from dataclasses import InitVar, dataclass, field
from enum import Enum, auto
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np

from .errors import InvalidConfigurationError, OutOfRangeError
from .tile import Tile, TileStatus

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    SOLVED = auto()
    FAILED = auto()


_ORTHOGONAL_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class FieldConfig:
    """
    Configuration for a Minesweeper field.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        mine_count: Total mines to place.
    """

    rows: int = 9
    columns: int = 9
    mine_count: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.columns < 1:
            raise InvalidConfigurationError(
                f"Field dimensions must be positive, got {self.rows}x{self.columns}"
            )
        if self.mine_count < 0:
            raise InvalidConfigurationError("Number of mines cannot be negative")
        if self.mine_count > self.tile_count:
            raise InvalidConfigurationError(
                f"Too many mines (max {self.tile_count})"
            )

    @property
    def tile_count(self) -> int:
        """Total number of tiles in the field."""
        return self.rows * self.columns


# ============================================================================
# Field Class
# ============================================================================

@dataclass
class Field:
    """
    Minesweeper playing field.

    Owns the grid of tiles and the game state. Mines are placed at
    construction, either at random (``rng``) or at explicit positions
    (``mines``). The game state is only changed by ``open``.
    """

    config: FieldConfig = field(default_factory=FieldConfig)
    rng: InitVar[Optional[random.Random]] = None
    mines: InitVar[Optional[Iterable[Position]]] = None
    _grid: List[List[Tile]] = field(default_factory=list, init=False, repr=False)
    _state: GameState = field(default=GameState.PLAYING, init=False)

    def __post_init__(
        self,
        rng: Optional[random.Random],
        mines: Optional[Iterable[Position]],
    ) -> None:
        """Generate the grid after dataclass creation."""
        if mines is None:
            positions = self._random_mine_positions(rng or random.Random())
        else:
            positions = self._checked_mine_positions(mines)
        self._generate(positions)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "config" and name in self.__dict__:
            raise AttributeError("Field config cannot change once generated")
        super().__setattr__(name, value)

    # ========================================================================
    # Generation (Low-level)
    # ========================================================================

    def _random_mine_positions(self, rng: random.Random) -> List[Position]:
        """Pick distinct mine positions uniformly at random."""
        all_positions = [
            (row, column)
            for row in range(self.config.rows)
            for column in range(self.config.columns)
        ]
        return rng.sample(all_positions, self.config.mine_count)

    def _checked_mine_positions(self, mines: Iterable[Position]) -> List[Position]:
        """Validate an explicit mine layout."""
        positions = [(int(row), int(column)) for row, column in mines]
        for row, column in positions:
            if not self._is_valid_position(row, column):
                raise InvalidConfigurationError(
                    f"Mine position ({row}, {column}) is outside the "
                    f"{self.config.rows}x{self.config.columns} field"
                )
        if len(set(positions)) != len(positions):
            raise InvalidConfigurationError("Mine positions must be distinct")
        if len(positions) != self.config.mine_count:
            raise InvalidConfigurationError(
                f"Expected {self.config.mine_count} mine positions, "
                f"got {len(positions)}"
            )
        return positions

    def _generate(self, mine_positions: List[Position]) -> None:
        """Place mines, then fill every other tile with its clue."""
        mine_set = set(mine_positions)
        grid: List[List[Tile]] = []
        for row in range(self.config.rows):
            grid_row = []
            for column in range(self.config.columns):
                if (row, column) in mine_set:
                    grid_row.append(Tile.mine())
                else:
                    count = sum(
                        1 for position in self.neighbors(row, column)
                        if position in mine_set
                    )
                    grid_row.append(Tile.clue(count))
            grid.append(grid_row)
        self._grid = grid
        logger.debug(
            "Generated %dx%d field with %d mines",
            self.config.rows, self.config.columns, self.config.mine_count,
        )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def neighbors(self, row: int, column: int) -> List[Position]:
        """
        Get the edge-clipped 8-neighbourhood of a position.

        Args:
            row: Row index of center tile.
            column: Column index of center tile.

        Returns:
            List of (row, column) tuples for valid neighbours.
        """
        result = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = column + delta_col
                if self._is_valid_position(new_row, new_col):
                    result.append((new_row, new_col))
        return result

    def _orthogonal_neighbors(self, row: int, column: int) -> List[Position]:
        """Get in-bounds up/down/left/right neighbours."""
        return [
            (row + delta_row, column + delta_col)
            for delta_row, delta_col in _ORTHOGONAL_OFFSETS
            if self._is_valid_position(row + delta_row, column + delta_col)
        ]

    def _is_valid_position(self, row: int, column: int) -> bool:
        """Check if position is within field bounds."""
        return 0 <= row < self.config.rows and 0 <= column < self.config.columns

    def _check_position(self, row: int, column: int) -> None:
        if not self._is_valid_position(row, column):
            raise OutOfRangeError(
                row, column, self.config.rows, self.config.columns
            )

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def open(self, row: int, column: int) -> bool:
        """
        Open the tile at the given position.

        Only closed tiles are opened; marked tiles are protected. Opening a
        mine fails the game. Opening a clue of value 0 also opens the
        connected region of empty tiles, after which the win condition is
        checked.

        Args:
            row: Row index to open.
            column: Column index to open.

        Returns:
            True if the tile was opened, False if it was already open or
            marked.

        Raises:
            OutOfRangeError: If the position is outside the field.
        """
        self._check_position(row, column)
        tile = self._grid[row][column]
        if not tile.open():
            return False

        if tile.is_mine:
            self._finish(GameState.FAILED)
            return True

        if tile.value == 0:
            self._open_adjacent(row, column)
        if self.is_solved():
            self._finish(GameState.SOLVED)
        return True

    def _open_adjacent(self, row: int, column: int) -> None:
        """Open the 4-connected region of clues around an empty tile."""
        stack = [(row, column)]
        opened = 0
        while stack:
            current_row, current_col = stack.pop()
            for neighbor_row, neighbor_col in self._orthogonal_neighbors(
                current_row, current_col
            ):
                neighbor = self._grid[neighbor_row][neighbor_col]
                if neighbor.is_mine or not neighbor.open():
                    continue
                opened += 1
                if neighbor.value == 0:
                    stack.append((neighbor_row, neighbor_col))
        logger.debug("Flood fill from (%d, %d) opened %d tiles", row, column, opened)

    def _finish(self, state: GameState) -> None:
        """Move to a terminal state unless the game is already over."""
        if self._state != GameState.PLAYING:
            return
        self._state = state
        logger.info("Game %s after %d open tiles", state.name, self.open_count)

    def mark(self, row: int, column: int) -> bool:
        """
        Toggle the mark on a tile.

        Args:
            row: Row index.
            column: Column index.

        Returns:
            True if the mark was toggled, False if the tile is open.

        Raises:
            OutOfRangeError: If the position is outside the field.
        """
        self._check_position(row, column)
        return self._grid[row][column].toggle_mark()

    def is_solved(self) -> bool:
        """Check whether every tile left unopened is a mine."""
        return self.config.tile_count - self.open_count == self.config.mine_count

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def columns(self) -> int:
        return self.config.columns

    @property
    def mine_count(self) -> int:
        return self.config.mine_count

    @property
    def state(self) -> GameState:
        """Get current game state."""
        return self._state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was solved."""
        return self._state == GameState.SOLVED

    @property
    def is_lost(self) -> bool:
        """Check if a mine was opened."""
        return self._state == GameState.FAILED

    def tile(self, row: int, column: int) -> Tile:
        """
        Get the tile at a position.

        Raises:
            OutOfRangeError: If the position is outside the field.
        """
        self._check_position(row, column)
        return self._grid[row][column]

    get_tile = tile

    def count(self, status: TileStatus) -> int:
        """Count tiles with the given status."""
        return sum(
            1 for grid_row in self._grid for tile in grid_row
            if tile.status == status
        )

    @property
    def open_count(self) -> int:
        return self.count(TileStatus.OPEN)

    @property
    def marked_count(self) -> int:
        return self.count(TileStatus.MARKED)

    def remaining_mine_count(self) -> int:
        """Mines minus marks. Negative when the player over-marks."""
        return self.config.mine_count - self.marked_count

    def closed_positions(self) -> List[Position]:
        """
        Get positions that can still be opened.

        Returns:
            List of (row, column) positions of closed tiles.
        """
        return [
            (row, column)
            for row in range(self.config.rows)
            for column in range(self.config.columns)
            if self._grid[row][column].is_closed
        ]

    def mine_positions(self) -> List[Position]:
        """Get positions of every mine, in row-major order."""
        return [
            (row, column)
            for row in range(self.config.rows)
            for column in range(self.config.columns)
            if self._grid[row][column].is_mine
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get field state as numpy array for agents.

        Returns:
            2D numpy array where:
                -1 = closed
                -2 = marked
                0-8 = open clue with adjacent count
                9 = open mine
        """
        obs = np.zeros((self.config.rows, self.config.columns), dtype=np.int8)
        for row in range(self.config.rows):
            for column in range(self.config.columns):
                obs[row, column] = self._grid[row][column].to_observation()
        return obs

    # ========================================================================
    # Debug Rendering
    # ========================================================================

    def render(self) -> str:
        """
        Render the field as text.

        Columns are headed by their index, rows are labelled A, B, ... (by
        index past Z), and every tile is shown by its glyph.
        """
        lines = [" " * 3 + "".join(f"{column:>4}" for column in range(self.config.columns))]
        for row, grid_row in enumerate(self._grid):
            label = chr(ord("A") + row) if row < 26 else str(row)
            lines.append(f"{label:>3}" + "".join(f"{tile.glyph:>4}" for tile in grid_row))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
