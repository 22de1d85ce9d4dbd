"""
Unit tests for the Gymnasium environment wrapper.
"""
import numpy as np
import pytest
from minefield import FieldConfig, GameState, MinefieldEnv, make_vec_env
from minefield.environment import (
    FAILED_REWARD,
    INVALID_ACTION_REWARD,
    SAFE_OPEN_REWARD,
    SOLVED_REWARD,
)


@pytest.fixture
def env(small_config: FieldConfig) -> MinefieldEnv:
    """Create a small environment rendered as text."""
    environment = MinefieldEnv(config=small_config, render_mode="ansi")
    environment.reset(seed=0)
    return environment


def first_position(env: MinefieldEnv, want_mine: bool) -> int:
    """Find the action index of the first mine or safe tile."""
    for row in range(env.config.rows):
        for column in range(env.config.columns):
            if env.field.tile(row, column).is_mine == want_mine:
                return row * env.config.columns + column
    raise AssertionError("no matching tile")


def first_numbered_clue(env: MinefieldEnv) -> int:
    """Find the action index of the first clue bordering a mine."""
    for row in range(env.config.rows):
        for column in range(env.config.columns):
            tile = env.field.tile(row, column)
            if tile.is_clue and tile.value > 0:
                return row * env.config.columns + column
    raise AssertionError("no numbered clue")


# ============================================================================
# Space Tests
# ============================================================================

class TestSpaces:
    """Test observation and action spaces."""

    def test_observation_in_space(self, env: MinefieldEnv) -> None:
        """Reset observation should belong to the observation space."""
        obs, _ = env.reset(seed=1)
        assert env.observation_space.contains(obs)

    def test_action_space_size(self, env: MinefieldEnv) -> None:
        """There should be one action per tile."""
        assert env.action_space.n == 16

    def test_default_config(self) -> None:
        """Environment defaults to a 9x9 field with 10 mines."""
        environment = MinefieldEnv()
        assert environment.observation_space.shape == (9, 9)
        assert environment.field.mine_count == 10


# ============================================================================
# Reset Tests
# ============================================================================

class TestReset:
    """Test episode reset."""

    def test_reset_returns_closed_field(self, env: MinefieldEnv) -> None:
        """Reset should produce an all-closed observation."""
        obs, info = env.reset(seed=3)
        assert np.all(obs == -1)
        assert info["game_state"] == GameState.PLAYING.name
        assert info["steps"] == 0
        assert info["valid_actions"] == 16

    def test_seeded_reset_is_reproducible(self, env: MinefieldEnv) -> None:
        """Same seed should give the same mine layout."""
        env.reset(seed=42)
        first = env.field.mine_positions()
        env.reset(seed=42)
        assert env.field.mine_positions() == first

    def test_reset_generates_new_field(self, env: MinefieldEnv) -> None:
        """Reset should replace a finished field."""
        env.step(first_position(env, want_mine=True))
        env.reset()
        assert env.field.is_playing is True


# ============================================================================
# Step Tests
# ============================================================================

class TestStep:
    """Test rewards and termination."""

    def test_mine_ends_episode(self, env: MinefieldEnv) -> None:
        """Opening a mine terminates with the failure reward."""
        _, reward, terminated, truncated, info = env.step(
            first_position(env, want_mine=True)
        )
        assert reward == FAILED_REWARD
        assert terminated is True
        assert truncated is False
        assert info["game_state"] == GameState.FAILED.name

    def test_repeat_action_is_penalised(self, env: MinefieldEnv) -> None:
        """Opening an already open tile gives the invalid reward."""
        action = first_numbered_clue(env)
        _, reward, terminated, _, _ = env.step(action)
        assert reward == SAFE_OPEN_REWARD
        assert terminated is False
        _, reward, _, _, _ = env.step(action)
        assert reward == INVALID_ACTION_REWARD

    def test_opening_every_safe_tile_solves(self, env: MinefieldEnv) -> None:
        """Opening all safe tiles ends with the solved reward."""
        rewards = []
        terminated = False
        for row in range(env.config.rows):
            for column in range(env.config.columns):
                tile = env.field.tile(row, column)
                if tile.is_mine or not tile.is_closed:
                    continue
                _, reward, terminated, _, info = env.step(
                    row * env.config.columns + column
                )
                rewards.append(reward)
        assert terminated is True
        assert rewards[-1] == SOLVED_REWARD
        assert all(r == SAFE_OPEN_REWARD for r in rewards[:-1])
        assert info["game_state"] == GameState.SOLVED.name
        assert info["open"] == info["total_safe"]


# ============================================================================
# Mask and Render Tests
# ============================================================================

class TestMaskAndRender:
    """Test action mask and rendering."""

    def test_action_mask_excludes_open_tiles(self, env: MinefieldEnv) -> None:
        """Open tiles should be masked out."""
        action = first_position(env, want_mine=False)
        env.step(action)
        mask = env.get_action_mask()
        assert mask.dtype == bool
        assert mask[action] == False  # noqa: E712
        assert mask.sum() == len(env.field.closed_positions())

    def test_ansi_render_matches_field(self, env: MinefieldEnv) -> None:
        """ANSI rendering is the field's debug text."""
        assert env.render() == env.field.render()

    def test_human_render_prints(
        self, small_config: FieldConfig, capsys: pytest.CaptureFixture
    ) -> None:
        """Human rendering prints instead of returning."""
        environment = MinefieldEnv(config=small_config, render_mode="human")
        environment.reset(seed=0)
        assert environment.render() is None
        assert "A" in capsys.readouterr().out


# ============================================================================
# Vectorized Environment Tests
# ============================================================================

class TestVecEnv:
    """Test the vectorized environment factory."""

    def test_vec_env_batches_observations(self, small_config: FieldConfig) -> None:
        """Each sub-environment contributes one observation."""
        vec_env = make_vec_env(n_envs=2, config=small_config)
        try:
            obs, _ = vec_env.reset(seed=0)
            assert obs.shape == (2, 4, 4)
            assert np.all(obs == -1)
        finally:
            vec_env.close()
