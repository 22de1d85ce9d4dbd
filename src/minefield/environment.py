"""
Gymnasium environment wrapper for the Minesweeper field.

Provides a standard RL interface over ``Field`` so agents can play it.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .field import Field, FieldConfig, GameState


INVALID_ACTION_REWARD = -0.1
SAFE_OPEN_REWARD = 1.0
SOLVED_REWARD = 10.0
FAILED_REWARD = -10.0


# ============================================================================
# Minefield Environment
# ============================================================================

class MinefieldEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = closed tile
        - -2 = marked tile
        - 0-8 = open clue with adjacent mine count
        - 9 = open mine

    Actions:
        Discrete action space of size rows * columns.
        Action i opens the tile at (i // columns, i % columns).

    Rewards:
        - +1 for opening a safe tile
        - +10 for solving the field
        - -10 for opening a mine
        - -0.1 for invalid action (already open or marked)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[FieldConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            config: Field configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or FieldConfig()
        self.field = Field(self.config)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.rows, self.config.columns),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.tile_count)

        self._steps = 0
        self._total_safe_tiles = self.config.tile_count - self.config.mine_count

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new episode on a freshly generated field.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        field_seed = int(self.np_random.integers(0, 2**32))
        self.field = Field(self.config, rng=random.Random(field_seed))
        self._steps = 0

        return self.field.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Tile index to open (row * columns + column).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        row, column = self._action_to_position(int(action))
        self._steps += 1

        reward = self._calculate_reward(row, column)

        observation = self.field.get_observation()
        terminated = not self.field.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, column) position."""
        return divmod(action, self.config.columns)

    def _calculate_reward(self, row: int, column: int) -> float:
        """Open a tile and score the result."""
        if not self.field.open(row, column):
            return INVALID_ACTION_REWARD
        if self.field.state == GameState.SOLVED:
            return SOLVED_REWARD
        if self.field.state == GameState.FAILED:
            return FAILED_REWARD
        return SAFE_OPEN_REWARD

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "open": self.field.open_count,
            "total_safe": self._total_safe_tiles,
            "game_state": self.field.state.name,
            "remaining_mines": self.field.remaining_mine_count(),
            "valid_actions": len(self.field.closed_positions()),
        }

    def render(self) -> Optional[str]:
        """Render the current field state."""
        if self.render_mode == "ansi":
            return self.field.render()
        if self.render_mode == "human":
            print(self.field.render())
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = closed tile.
        """
        return (self.field.get_observation() == -1).flatten()


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[FieldConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel rollouts.

    Args:
        n_envs: Number of parallel environments.
        config: Field configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinefieldEnv:
        return MinefieldEnv(config=config)

    return gym.vector.AsyncVectorEnv([make_env for _ in range(n_envs)])
