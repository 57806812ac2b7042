# flappy/tests/test_level.py
import random

from flappy.game.config import WIDTH, HEIGHT, PLAYER_X, GameConfig, get_preset
from flappy.game.level import Pipe, PipeField, any_pipe_hit, player_hits_pipe

EDGE_CFG = GameConfig(min_pipe_distance=None)
SPACED_CFG = get_preset("spaced")

# player box at the default x: (left, top, right, bottom)
def box(y, x=PLAYER_X, size=20):
    return (x, y, x + size, y + size)


def test_pipe_pruned_when_right_edge_reaches_zero():
    field = PipeField(EDGE_CFG, seed=1)
    pipe = field.spawn()
    assert pipe.x == WIDTH

    for _ in range(184):
        assert field.advance() == 0
    assert field.pipes == [pipe]
    assert pipe.x + EDGE_CFG.pipe_width == 2

    assert field.advance() == 1
    assert field.pipes == []


def test_edge_spawn_gap_within_screen():
    field = PipeField(EDGE_CFG, seed=7)
    for _ in range(200):
        p = field.spawn()
        assert p.x == WIDTH
        assert 0 <= p.top_height < HEIGHT - EDGE_CFG.pipe_gap
        assert p.top_height + EDGE_CFG.pipe_gap + p.bottom_height == HEIGHT


def test_spaced_spawn_keeps_distance_and_gap_bounds():
    field = PipeField(SPACED_CFG, seed=3)
    first = field.spawn()
    assert first.x == WIDTH
    prev = first
    for _ in range(50):
        p = field.spawn()
        assert prev.x + SPACED_CFG.pipe_width <= p.x < prev.x + SPACED_CFG.min_pipe_distance
        assert SPACED_CFG.min_gap_top <= p.top_height < HEIGHT - SPACED_CFG.pipe_gap
        prev = p


def test_same_seed_same_pipes():
    a, b = PipeField(SPACED_CFG, seed=42), PipeField(SPACED_CFG, seed=42)
    for _ in range(2000):
        a.maybe_spawn(); b.maybe_spawn()
        a.advance(); b.advance()
    assert [(p.x, p.top_height) for p in a.pipes] == [(p.x, p.top_height) for p in b.pipes]


def test_spawn_rate_roughly_one_in_ninety():
    field = PipeField(EDGE_CFG, seed=5)
    spawned = sum(field.maybe_spawn() for _ in range(90_000))
    assert 800 < spawned < 1200


def test_hit_outside_gap_only():
    pipe = Pipe(x=40, top_height=100, bottom_height=HEIGHT - 250)
    assert not player_hits_pipe(box(150), pipe, EDGE_CFG)
    assert player_hits_pipe(box(90), pipe, EDGE_CFG)      # into the top barrier
    assert player_hits_pipe(box(240), pipe, EDGE_CFG)     # into the bottom barrier
    assert not player_hits_pipe(box(100), pipe, EDGE_CFG)  # flush with the gap top
    assert not player_hits_pipe(box(230), pipe, EDGE_CFG)  # flush with the gap bottom


def test_no_hit_without_horizontal_overlap():
    touching_right = Pipe(x=PLAYER_X + 20, top_height=300, bottom_height=30)
    touching_left = Pipe(x=PLAYER_X - 50, top_height=300, bottom_height=30)
    assert not player_hits_pipe(box(10), touching_right, EDGE_CFG)
    assert not player_hits_pipe(box(10), touching_left, EDGE_CFG)


def test_collision_independent_of_pipe_order():
    rng = random.Random(11)
    for _ in range(200):
        pipes = [Pipe(x=rng.uniform(-60, 340), top_height=rng.uniform(0, 330), bottom_height=0)
                 for _ in range(rng.randint(0, 6))]
        b = box(rng.uniform(0, 460))
        expected = any_pipe_hit(b, pipes, EDGE_CFG)
        shuffled = pipes[:]
        rng.shuffle(shuffled)
        assert any_pipe_hit(b, shuffled, EDGE_CFG) == expected
        assert any_pipe_hit(b, list(reversed(pipes)), EDGE_CFG) == expected


def test_collect_passed_scores_each_pipe_once():
    field = PipeField(EDGE_CFG, seed=0)
    field.pipes = [
        Pipe(x=PLAYER_X - 51, top_height=100, bottom_height=230),  # right edge at 49 -> passed
        Pipe(x=PLAYER_X - 50, top_height=100, bottom_height=230),  # right edge at 50 -> not yet
    ]
    assert field.collect_passed(PLAYER_X) == 1
    assert [p.scored for p in field.pipes] == [True, False]
    assert field.collect_passed(PLAYER_X) == 0
    field.advance()
    assert field.collect_passed(PLAYER_X) == 1
    assert all(p.scored for p in field.pipes)
