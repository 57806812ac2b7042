# flappy/game/session.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from .config import GameConfig, get_preset
from .level import PipeField, any_pipe_hit
from .player import Player

log = logging.getLogger(__name__)


class GameSession:
    """
    All mutable state of one game: player, pipes, score, terminal flag.

    The host calls `activate()` on input and `step()` once per frame. Once
    `game_over` is set, `step()` does nothing until `activate()` restarts.
    """
    def __init__(self, cfg: Optional[GameConfig] = None, seed: int | None = None):
        self.cfg = (cfg or get_preset()).validate()
        self.player = Player()
        self.field = PipeField(self.cfg, seed)
        self.seed = self.field.seed
        self.score = 0
        self.game_over = False
        self.death_cause: Optional[str] = None   # "ceiling" | "floor" | "pipe" | None
        self.tick = 0

    @property
    def pipes(self):
        return self.field.pipes

    # -------------------- Input --------------------

    def activate(self) -> str:
        """The single input: flap while playing, restart when over. Returns what happened."""
        if self.game_over:
            self.restart()
            return "restart"
        return "flap" if self.player.try_flap(self.cfg) else "ignored"

    def flap(self) -> bool:
        if self.game_over:
            return False
        return self.player.try_flap(self.cfg)

    def restart(self):
        """Back to the initial state. The RNG keeps running so the next run differs."""
        self.player.reset()
        self.field.reset()
        self.score = 0
        self.game_over = False
        self.death_cause = None
        self.tick = 0
        log.info("session restarted (seed=%s)", self.seed)

    # -------------------- Frame --------------------

    def step(self) -> Dict[str, Any]:
        """Advance one frame. Returns per-frame info; a terminal session is left untouched."""
        if self.game_over:
            return {"advanced": False, "scored": 0, "spawned": False, "game_over": True}

        self.tick += 1
        self.player.update_physics(self.cfg)
        spawned = self.field.maybe_spawn()
        self.field.advance()

        cause = self.check_collision()
        if cause is not None:
            self.game_over = True
            self.death_cause = cause
            log.info("game over: %s (score=%d, tick=%d)", cause, self.score, self.tick)

        scored = self.field.collect_passed(self.player.x)
        if scored:
            self.score += scored
            log.debug("scored %d -> %d", scored, self.score)

        return {"advanced": True, "scored": scored, "spawned": spawned, "game_over": self.game_over}

    def check_collision(self) -> Optional[str]:
        """Cause of death for the current frame, or None."""
        contact = self.player.contact
        if contact == "ceiling":
            return "ceiling"
        if contact == "floor" and self.cfg.floor_is_fatal:
            return "floor"
        if any_pipe_hit(self.player.box, self.field.pipes, self.cfg):
            return "pipe"
        return None
