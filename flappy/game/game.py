# flappy/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_ESCAPE
from .config import (
    WIDTH, HEIGHT, FPS, PRESETS, DEFAULT_PRESET,
    COLOR_BG, COLOR_FG, COLOR_DANGER, SCORE_FONT_PX, GAME_OVER_FONT_PX,
    get_preset
)
from .session import GameSession

log = logging.getLogger(__name__)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Flappy Pipes")
    p.add_argument("--preset", choices=sorted(PRESETS), default=DEFAULT_PRESET,
                   help="Physics / pipe tuning to play with.")
    p.add_argument("--seed", type=int, default=None,
                   help="Spawn seed. Omit for a random one (printed in the HUD).")
    p.add_argument("--fps", type=int, default=FPS)
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def load_fonts():
    if not pygame.font.get_init():
        pygame.font.init()
    return (pygame.font.SysFont("arial", SCORE_FONT_PX),
            pygame.font.SysFont("arial", GAME_OVER_FONT_PX))


def draw_session(screen: pygame.Surface, session: GameSession, fonts):
    """Render one frame: the play field with score, or the game-over card."""
    font_small, font_big = fonts
    screen.fill(COLOR_BG)

    if session.game_over:
        over = font_big.render("Game Over", True, COLOR_DANGER)
        final = font_big.render(f"Final Score: {session.score}", True, COLOR_DANGER)
        screen.blit(over, (WIDTH // 2 - 75, HEIGHT // 2 - over.get_height()))
        screen.blit(final, (WIDTH // 2 - 90, HEIGHT // 2 + 40 - final.get_height()))
        return

    session.player.draw(screen)
    session.field.draw(screen)
    screen.blit(font_small.render(f"Score: {session.score}", True, COLOR_FG), (10, 10))


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = get_preset(args.preset)
    session = GameSession(cfg, seed=args.seed)
    log.info("starting preset=%s seed=%s", args.preset, session.seed)

    pygame.init()
    pygame.display.set_caption(f"Flappy Pipes [{args.preset}] seed {session.seed}")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    fonts = load_fonts()

    while True:
        clock.tick(args.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_SPACE:
                    session.activate()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                session.activate()

        # A finished session does not advance; it only redraws the game-over card.
        session.step()
        draw_session(screen, session, fonts)
        pygame.display.flip()


if __name__ == "__main__":
    run()
