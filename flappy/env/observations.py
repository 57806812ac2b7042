# flappy/env/observations.py
from __future__ import annotations
from typing import Optional
import numpy as np

from flappy.game.config import WIDTH, HEIGHT
from flappy.game.level import Pipe

OBS_SIZE = 6

def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)

def next_pipe(session) -> Optional[Pipe]:
    """First pipe whose right edge has not yet passed the player's left edge."""
    cfg = session.cfg
    for pipe in session.field.pipes:
        if pipe.right(cfg) >= session.player.x:
            return pipe
    return None

def build_observation(session) -> np.ndarray:
    """
    Returns float32 (6,):
      [y_norm, vy_norm, next_dx_norm, gap_top_norm, gap_bottom_norm, can_flap]
    - y_norm in [0,1] over [0, HEIGHT - player.height]
    - vy_norm in [-1,1], scaled by the larger of |flap_impulse| and max_fall_speed
    - next pipe absent -> dx=1, gap_top=0, gap_bottom=1 (wide open)
    """
    cfg = session.cfg
    player = session.player

    y_norm = _clamp01(player.y / max(1.0, HEIGHT - player.height))
    vy_max = max(abs(cfg.flap_impulse), cfg.max_fall_speed)
    vy_norm = max(-1.0, min(1.0, player.vy / vy_max))

    pipe = next_pipe(session)
    if pipe is None:
        dx, gap_top, gap_bot = 1.0, 0.0, 1.0
    else:
        dx = _clamp01((pipe.x - player.x) / WIDTH)
        gap_top = _clamp01(pipe.top_height / HEIGHT)
        gap_bot = _clamp01(pipe.gap_bottom(cfg) / HEIGHT)

    can_flap = 1.0 if player.can_flap() else 0.0
    return np.array([y_norm, vy_norm, dx, gap_top, gap_bot, can_flap], dtype=np.float32)
