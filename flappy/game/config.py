# flappy/game/config.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Dict, Optional

# --- Display ---
WIDTH = 320
HEIGHT = 480
FPS = 60

# --- Player ---
PLAYER_X = 50               # player's fixed x (pipes scroll left)
PLAYER_START_Y = 150
PLAYER_W = 20
PLAYER_H = 20

# --- Colors (RGB) ---
COLOR_BG = (112, 197, 206)
COLOR_FG = (0, 0, 0)
COLOR_PLAYER = (255, 255, 0)
COLOR_PIPE = (0, 128, 0)
COLOR_DANGER = (255, 0, 0)

SCORE_FONT_PX = 20
GAME_OVER_FONT_PX = 30


@dataclass(frozen=True)
class GameConfig:
    """
    Tuning knobs of one game variant. Units are pixels and frames (ticks).
    - min_pipe_distance = None -> pipes always spawn at the right screen edge
    - min_pipe_distance set    -> spawn relative to the previous pipe, with the
      gap top kept in [min_gap_top, HEIGHT - pipe_gap)
    """
    gravity: float = 0.2            # px/tick^2
    flap_impulse: float = -5.0      # velocity set on flap (negative = up)
    max_fall_speed: float = 5.0     # clamp on downward velocity
    flap_cooldown_ticks: int = 12   # ~200 ms at 60 FPS
    spawn_rate: int = 90            # one pipe per `spawn_rate` frames on average
    pipe_width: int = 50
    pipe_gap: int = 150             # vertical opening between the two barriers
    pipe_speed: float = 2.0         # px/tick
    min_pipe_distance: Optional[int] = 150
    min_gap_top: int = 100
    floor_is_fatal: bool = False

    @property
    def spaced(self) -> bool:
        return self.min_pipe_distance is not None

    @property
    def spawn_probability(self) -> float:
        return 1.0 / self.spawn_rate

    def validate(self) -> "GameConfig":
        if self.gravity <= 0:
            raise ValueError(f"gravity must be > 0, got {self.gravity}")
        if self.flap_impulse >= 0:
            raise ValueError(f"flap_impulse must be < 0 (upwards), got {self.flap_impulse}")
        if self.max_fall_speed <= 0:
            raise ValueError(f"max_fall_speed must be > 0, got {self.max_fall_speed}")
        if self.flap_cooldown_ticks < 0:
            raise ValueError(f"flap_cooldown_ticks must be >= 0, got {self.flap_cooldown_ticks}")
        if self.spawn_rate < 1:
            raise ValueError(f"spawn_rate must be >= 1, got {self.spawn_rate}")
        if self.pipe_width <= 0 or self.pipe_speed <= 0:
            raise ValueError("pipe_width and pipe_speed must be > 0")
        if not 0 < self.pipe_gap < HEIGHT:
            raise ValueError(f"pipe_gap must fit the screen (0 < gap < {HEIGHT}), got {self.pipe_gap}")
        if self.spaced:
            if self.min_pipe_distance < self.pipe_width:
                raise ValueError(
                    f"min_pipe_distance ({self.min_pipe_distance}) must be >= pipe_width ({self.pipe_width})"
                )
            if self.min_gap_top < 0 or self.min_gap_top + self.pipe_gap >= HEIGHT:
                raise ValueError(
                    f"min_gap_top + pipe_gap must stay below {HEIGHT}, got {self.min_gap_top} + {self.pipe_gap}"
                )
        return self

    def with_overrides(self, **changes) -> "GameConfig":
        """Copy with some fields replaced (None values are ignored)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes).validate()


# --- Presets ---
# "spaced" is the reference tuning; "classic" and "strict" keep the older
# edge-spawning behaviour with different physics.
PRESETS: Dict[str, GameConfig] = {
    "spaced": GameConfig(),
    "classic": GameConfig(
        gravity=0.25, flap_impulse=-5.5, max_fall_speed=6.0, flap_cooldown_ticks=9,
        pipe_gap=140, min_pipe_distance=None,
    ),
    "strict": GameConfig(
        gravity=0.3, flap_impulse=-6.0, max_fall_speed=6.0, flap_cooldown_ticks=10,
        pipe_gap=160, min_pipe_distance=None, floor_is_fatal=True,
    ),
}
DEFAULT_PRESET = "spaced"


def get_preset(name: str = DEFAULT_PRESET) -> GameConfig:
    try:
        return PRESETS[name].validate()
    except KeyError:
        raise ValueError(f"Unknown preset {name!r}; choose one of {sorted(PRESETS)}") from None
