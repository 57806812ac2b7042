# flappy/tests/test_session.py
from flappy.game.config import HEIGHT, PLAYER_H, GameConfig, get_preset
from flappy.game.level import Pipe
from flappy.game.session import GameSession

# Practically never spawns on its own, so tests place pipes by hand.
QUIET = GameConfig(spawn_rate=10**9)


def test_step_reports_spawns():
    always = GameSession(GameConfig(spawn_rate=1), seed=1)
    frame = always.step()
    assert frame["spawned"] is True and len(always.pipes) == 1

    quiet = GameSession(QUIET, seed=1)
    assert quiet.step()["spawned"] is False and quiet.pipes == []

    quiet.game_over = True
    assert quiet.step()["spawned"] is False


def test_ceiling_contact_ends_the_game():
    s = GameSession(QUIET, seed=1)
    s.player.y, s.player.vy = 1.0, -5.0
    s.step()
    assert s.game_over and s.death_cause == "ceiling"


def test_floor_contact_not_fatal_by_default():
    s = GameSession(QUIET, seed=1)
    s.player.y = HEIGHT - PLAYER_H - 0.5
    for _ in range(120):
        s.step()
    assert not s.game_over
    assert s.player.y == HEIGHT - PLAYER_H and s.player.vy == 0.0


def test_floor_contact_fatal_in_strict_preset():
    s = GameSession(get_preset("strict").with_overrides(spawn_rate=10**9), seed=1)
    s.player.y = HEIGHT - PLAYER_H
    s.step()
    assert s.game_over and s.death_cause == "floor"


def test_pipe_hit_ends_the_game_and_further_steps_are_noops():
    s = GameSession(QUIET, seed=1)
    s.field.pipes.append(Pipe(x=45, top_height=300, bottom_height=30))
    s.step()
    assert s.game_over and s.death_cause == "pipe"

    tick, y, x = s.tick, s.player.y, s.pipes[0].x
    for _ in range(10):
        frame = s.step()
        assert frame["advanced"] is False
    assert (s.tick, s.player.y, s.pipes[0].x) == (tick, y, x)


def test_passing_a_pipe_scores_once():
    s = GameSession(QUIET, seed=1)
    s.field.pipes.append(Pipe(x=-1, top_height=100, bottom_height=230))
    frame = s.step()
    assert frame["scored"] == 1 and s.score == 1
    for _ in range(5):
        s.step()
    assert s.score == 1
    assert not s.game_over


def test_score_monotonic_and_flags_never_cleared():
    s = GameSession(get_preset("spaced"), seed=2024)
    seen_scored = {}   # id -> pipe; holding the pipe keeps its id from being reused
    for _ in range(20_000):
        if s.game_over:
            s.activate()
            seen_scored.clear()
            continue
        # hover around the middle of the next gap
        ahead = [p for p in s.pipes if p.x + s.cfg.pipe_width >= s.player.x]
        target = ahead[0].top_height + s.cfg.pipe_gap * 0.6 if ahead else HEIGHT / 2
        if s.player.y + PLAYER_H > target:
            s.flap()

        before = s.score
        frame = s.step()
        assert s.score - before == frame["scored"] >= 0
        assert all(p.scored for p in seen_scored.values())
        seen_scored.update((id(p), p) for p in s.pipes if p.scored)


def test_activate_flaps_then_respects_cooldown():
    s = GameSession(QUIET, seed=1)
    s.player.vy = 3.0
    assert s.activate() == "flap"
    assert s.player.vy == -5.0
    assert s.activate() == "ignored"


def test_restart_resets_state_and_resumes():
    s = GameSession(QUIET, seed=1)
    s.score = 4
    s.field.pipes.append(Pipe(x=45, top_height=300, bottom_height=30))
    s.step()
    assert s.game_over

    assert s.activate() == "restart"
    assert s.score == 0 and s.pipes == []
    assert (s.player.y, s.player.vy) == (150.0, 0.0)
    assert not s.game_over and s.death_cause is None

    assert s.step()["advanced"] is True
    assert s.tick == 1


def test_flap_ignored_when_game_over():
    s = GameSession(QUIET, seed=1)
    s.game_over = True
    assert s.flap() is False


def test_sessions_are_independent_and_reproducible():
    a = GameSession(seed=99)
    b = GameSession(seed=99)
    other = GameSession(seed=100)
    for _ in range(600):
        a.step(); b.step(); other.step()
    assert [(p.x, p.top_height) for p in a.pipes] == [(p.x, p.top_height) for p in b.pipes]
    assert (a.score, a.game_over, a.player.y) == (b.score, b.game_over, b.player.y)
    assert a.seed == 99 and other.seed == 100
