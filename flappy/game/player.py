# flappy/game/player.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import pygame
from .config import (
    HEIGHT, PLAYER_X, PLAYER_START_Y, PLAYER_W, PLAYER_H, COLOR_PLAYER, GameConfig
)

@dataclass
class Player:
    """
    Square bird at a fixed x. Only y / vy change.
    - _flap_cooldown counts remaining ticks; 0 means a flap is allowed
    - contact is the screen edge touched during the last update ("floor", "ceiling" or None)
    """
    x: float = float(PLAYER_X)
    y: float = float(PLAYER_START_Y)
    vy: float = 0.0
    width: int = PLAYER_W
    height: int = PLAYER_H
    _flap_cooldown: int = 0
    contact: Optional[str] = None

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), self.width, self.height)

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) in float coords, used for collisions."""
        return self.x, self.y, self.x + self.width, self.y + self.height

    @property
    def flap_cooldown(self) -> int:
        return self._flap_cooldown

    def can_flap(self) -> bool:
        return self._flap_cooldown <= 0

    def try_flap(self, cfg: GameConfig) -> bool:
        """Apply the flap impulse unless cooling down. Returns True if performed."""
        if self.can_flap():
            self.vy = cfg.flap_impulse
            self._flap_cooldown = cfg.flap_cooldown_ticks
            return True
        return False

    def update_physics(self, cfg: GameConfig):
        """One tick: cooldown, gravity, fall-speed clamp, then keep the box on screen."""
        if self._flap_cooldown > 0:
            self._flap_cooldown -= 1

        self.vy += cfg.gravity
        if self.vy > cfg.max_fall_speed:
            self.vy = cfg.max_fall_speed

        self.y += self.vy

        self.contact = None
        floor_y = HEIGHT - self.height
        if self.y > floor_y:
            self.y = floor_y
            self.vy = 0.0
            self.contact = "floor"
        elif self.y < 0:
            self.y = 0.0
            self.contact = "ceiling"

    def reset(self):
        self.x = float(PLAYER_X)
        self.y = float(PLAYER_START_Y)
        self.vy = 0.0
        self._flap_cooldown = 0
        self.contact = None

    def draw(self, surf: pygame.Surface, color=COLOR_PLAYER):
        pygame.draw.rect(surf, color, self.rect)
