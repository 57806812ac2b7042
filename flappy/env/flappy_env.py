# flappy/env/flappy_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from flappy.game.config import WIDTH, HEIGHT, FPS, GameConfig, get_preset
from flappy.game.game import draw_session, load_fonts
from flappy.game.session import GameSession
from flappy.env.observations import build_observation, OBS_SIZE

REWARD_ALIVE = 0.1
REWARD_PIPE = 1.0
REWARD_DEATH = -1.0


class FlappyEnv(gym.Env):
    """
    Flappy Pipes Gymnasium environment (vector observations).
    - Simulation at 60 Hz, one session frame per sub-step.
    - Agent acts every `frame_skip` frames (default 2) -> 30 decisions/sec.
    - Observation: shape (6,), float32, see observations.build_observation.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 2,
                 time_limit_seconds: Optional[float] = 60.0,
                 config: Optional[GameConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode {render_mode!r}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = (config or get_preset()).validate()
        self.sim_fps = FPS

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = FLAP
        self.action_space = gym.spaces.Discrete(2)

        # [y, vy, next_dx, gap_top, gap_bottom, can_flap]
        low = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32)
        high = np.ones(OBS_SIZE, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self.session: Optional[GameSession] = None
        self.timestep: int = 0

        self.screen = None
        self.clock = None
        self.fonts = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # A given seed drives the pipe RNG directly; without one, draw it from np_random.
        session_seed = int(seed) if seed is not None else int(self.np_random.integers(0, 2**31 - 1))
        self.session = GameSession(self.config, seed=session_seed)
        self.timestep = 0

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), self._info()

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "Call reset() before step()"
        session = self.session

        flapped = False
        if action == 1:
            flapped = session.flap()

        scored = 0
        for _ in range(self.frame_skip):
            frame = session.step()
            scored += frame["scored"]
            if session.game_over:
                break

        reward = REWARD_PIPE * scored
        reward += REWARD_DEATH if session.game_over else REWARD_ALIVE

        self.timestep += 1
        terminated = session.game_over
        truncated = bool(self.time_limit_decisions is not None
                         and self.timestep >= self.time_limit_decisions
                         and not terminated)

        info = self._info()
        info["flapped"] = flapped
        info["scored"] = scored

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        return build_observation(self.session)

    def _info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "seed": s.seed,
            "score": s.score,
            "tick": s.tick,
            "timestep": self.timestep,
            "death_cause": s.death_cause,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Flappy Pipes — Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.fonts = load_fonts()

        draw_session(self.screen, self.session, self.fonts)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.fonts = None
