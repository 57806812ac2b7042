# /experiments/sanity_rollout.py
"""
Sanity rollouts for FlappyEnv: random and/or heuristic flapping over fixed
seeds, one CSV row per episode, optional action traces for experiments.replay.

  python -m experiments.sanity_rollout --policies both --save-traces
  python -m experiments.sanity_rollout --policies heuristic --preset classic --seeds 111,222
"""

from __future__ import annotations
import argparse
import csv
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional

import numpy as np

from flappy.env.flappy_env import FlappyEnv
from flappy.game.config import PRESETS, DEFAULT_PRESET, get_preset

Policy = Callable[[np.ndarray], int]


def random_policy(seed: int, flap_prob: float = 0.1) -> Policy:
    rng = np.random.RandomState(10_000 + seed)
    return lambda _obs: int(rng.random_sample() < flap_prob)


def heuristic_policy(_seed: int) -> Policy:
    """Flap when sinking below the lower part of the next gap. obs = [y, vy, dx, gap_top, gap_bottom, can_flap]"""
    def act(obs: np.ndarray) -> int:
        y, vy, _dx, gap_top, gap_bot, can_flap = (float(v) for v in obs)
        target = gap_top + 0.65 * (gap_bot - gap_top)
        return int(can_flap > 0.5 and y > target and vy >= 0.0)
    return act


POLICIES = {"random": random_policy, "heuristic": heuristic_policy}


@dataclass
class Episode:
    policy: str
    preset: str
    seed: int
    frame_skip: int
    decisions: int = 0
    return_sum: float = 0.0
    score: int = 0
    flaps: int = 0
    terminated: bool = False
    truncated: bool = False
    death_cause: Optional[str] = None


def run_episode(ep: Episode, steps_limit: int) -> List[int]:
    """Play one episode in place on `ep`; returns the action sequence."""
    env = FlappyEnv(frame_skip=ep.frame_skip, config=get_preset(ep.preset))
    policy = POLICIES[ep.policy](ep.seed)
    actions: List[int] = []
    try:
        obs, _ = env.reset(seed=ep.seed)
        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(a)
            obs, r, ep.terminated, ep.truncated, info = env.step(a)
            ep.decisions += 1
            ep.return_sum += r
            ep.flaps += int(info["flapped"])
            ep.score = info["score"]
            ep.death_cause = info["death_cause"]
            if ep.terminated or ep.truncated:
                break
    finally:
        env.close()
    return actions


def save_trace(out_dir: Path, ep: Episode, actions: List[int]):
    trace_dir = out_dir / "traces" / ep.policy
    trace_dir.mkdir(parents=True, exist_ok=True)
    np.save(trace_dir / f"{ep.seed}_actions.npy", np.asarray(actions, dtype=np.int8))
    meta = f"seed={ep.seed}\npreset={ep.preset}\nframe_skip={ep.frame_skip}\npolicy={ep.policy}\n"
    (trace_dir / f"{ep.seed}_meta.txt").write_text(meta, encoding="utf-8")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", choices=["random", "heuristic", "both"], default="both")
    ap.add_argument("--preset", choices=sorted(PRESETS), default=DEFAULT_PRESET)
    ap.add_argument("--seeds", default="", help="Comma-separated seeds (default 101..120)")
    ap.add_argument("--frame-skip", type=int, default=2)
    ap.add_argument("--steps", type=int, default=10_000, help="Cap on decision steps")
    ap.add_argument("--out-dir", default="experiments/runs")
    ap.add_argument("--save-traces", action="store_true", help="Save actions for replay")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    policies = list(POLICIES) if args.policies == "both" else [args.policies]

    csv_path = out_dir / "episodes.csv"
    new_file = not csv_path.exists()
    print(f"Running {policies} on {len(seeds)} seeds (preset={args.preset}) -> {csv_path}")

    with csv_path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=[fl.name for fl in fields(Episode)])
        if new_file:
            writer.writeheader()
        for policy in policies:
            for seed in seeds:
                ep = Episode(policy=policy, preset=args.preset, seed=seed, frame_skip=args.frame_skip)
                actions = run_episode(ep, args.steps)
                if args.save_traces:
                    save_trace(out_dir, ep, actions)
                writer.writerow(asdict(ep))
                print(f"[{policy}] seed={seed} len={ep.decisions} score={ep.score} "
                      f"ret={ep.return_sum:.1f} cause={ep.death_cause}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
