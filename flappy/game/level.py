# flappy/game/level.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Tuple
import pygame
from .config import WIDTH, HEIGHT, COLOR_PIPE, GameConfig

log = logging.getLogger(__name__)


@dataclass
class Pipe:
    """A top + bottom barrier pair. top_height is also the y of the gap's top edge."""
    x: float
    top_height: float
    bottom_height: float
    scored: bool = False

    def right(self, cfg: GameConfig) -> float:
        return self.x + cfg.pipe_width

    def gap_bottom(self, cfg: GameConfig) -> float:
        return self.top_height + cfg.pipe_gap

    def rects(self, cfg: GameConfig) -> Tuple[pygame.Rect, pygame.Rect]:
        """(top barrier, bottom barrier) for drawing."""
        top = pygame.Rect(int(self.x), 0, cfg.pipe_width, int(self.top_height))
        bot = pygame.Rect(int(self.x), int(self.gap_bottom(cfg)), cfg.pipe_width, int(self.bottom_height))
        return top, bot


def player_hits_pipe(box: Tuple[float, float, float, float], pipe: Pipe, cfg: GameConfig) -> bool:
    """AABB test: horizontal overlap with the pipe AND vertically outside its gap."""
    left, top, right, bottom = box
    if right <= pipe.x or left >= pipe.right(cfg):
        return False
    return top < pipe.top_height or bottom > pipe.gap_bottom(cfg)


def any_pipe_hit(box, pipes: Iterable[Pipe], cfg: GameConfig) -> bool:
    return any(player_hits_pipe(box, p, cfg) for p in pipes)


class PipeField:
    """
    The ordered stream of pipes scrolling left.
    Spawning draws from a private random.Random so a seed replays the same run.
    """
    def __init__(self, cfg: GameConfig, seed: int | None = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.cfg = cfg
        self.seed = seed
        self.rng = random.Random(seed)
        self.pipes: List[Pipe] = []

    def reset(self):
        self.pipes = []

    def _next_spawn_x(self) -> float:
        cfg = self.cfg
        if not cfg.spaced or not self.pipes:
            return float(WIDTH)
        last = self.pipes[-1]
        return last.x + cfg.pipe_width + self.rng.random() * (cfg.min_pipe_distance - cfg.pipe_width)

    def _gap_top(self) -> float:
        cfg = self.cfg
        if cfg.spaced:
            return self.rng.random() * (HEIGHT - cfg.pipe_gap - cfg.min_gap_top) + cfg.min_gap_top
        return self.rng.random() * (HEIGHT - cfg.pipe_gap)

    def spawn(self) -> Pipe:
        x = self._next_spawn_x()
        top = self._gap_top()
        pipe = Pipe(x=x, top_height=top, bottom_height=HEIGHT - top - self.cfg.pipe_gap)
        self.pipes.append(pipe)
        log.debug("spawned pipe x=%.1f gap=[%.1f, %.1f)", pipe.x, top, pipe.gap_bottom(self.cfg))
        return pipe

    def maybe_spawn(self) -> bool:
        """Roll the per-frame spawn chance. Returns True if a pipe was added."""
        if self.rng.random() < self.cfg.spawn_probability:
            self.spawn()
            return True
        return False

    def advance(self) -> int:
        """Scroll every pipe left and drop those fully off-screen. Returns how many were dropped."""
        speed = self.cfg.pipe_speed
        for pipe in self.pipes:
            pipe.x -= speed
        before = len(self.pipes)
        self.pipes = [p for p in self.pipes if p.right(self.cfg) > 0]
        return before - len(self.pipes)

    def collect_passed(self, player_left: float) -> int:
        """Mark pipes whose right edge is left of the player as scored. Returns newly scored count."""
        gained = 0
        for pipe in self.pipes:
            if not pipe.scored and pipe.right(self.cfg) < player_left:
                pipe.scored = True
                gained += 1
        return gained

    def draw(self, surf: pygame.Surface, color=COLOR_PIPE):
        for pipe in self.pipes:
            top, bot = pipe.rects(self.cfg)
            pygame.draw.rect(surf, color, top)
            pygame.draw.rect(surf, color, bot)
