from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from pathlib import Path
from typing import Optional

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "agents",
    "solved",
    "skipped",
    "neighbor_checks",
    "constraints",
    "separations",
    "avg_speed",
    "max_speed",
    "neighbor_checks_per_agent",
    "tick_ms",
]


def _format_row(world: World, metrics: TickMetrics, tick_ms: float) -> list[object]:
    max_speed = 0.0
    for agent in world.agents:
        speed = math.hypot(agent.velocity.x, agent.velocity.z)
        if speed > max_speed:
            max_speed = speed
    per_agent = 0.0 if metrics.solved <= 0 else metrics.neighbor_checks / metrics.solved
    return [
        metrics.tick,
        metrics.agents,
        metrics.solved,
        metrics.skipped,
        metrics.neighbor_checks,
        metrics.constraints,
        metrics.separations,
        f"{metrics.average_speed:.4f}",
        f"{max_speed:.4f}",
        f"{per_agent:.4f}",
        f"{tick_ms:.3f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p99": _percentile(sorted_values, 0.99),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    config_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
) -> World:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    world = World(config)
    logger.info("running %d steps with %d agents (seed=%d)", steps, len(world.agents), config.seed)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    speed_series: list[float] = []
    checks_series: list[float] = []
    separations_total = 0

    for tick in range(steps):
        metrics = world.step(tick)
        tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
        tick_ms_series.append(tick_ms)
        speed_series.append(metrics.average_speed)
        checks_series.append(float(metrics.neighbor_checks))
        separations_total += metrics.separations
        if writer:
            writer.writerow(_format_row(world, metrics, tick_ms))

    if csv_file:
        csv_file.close()

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "agents": len(world.agents),
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "average_speed": _summary_stats(speed_series),
            "neighbor_checks": _summary_stats(checks_series),
            "separations_total": separations_total,
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return world


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless crowd steering simulation")
    parser.add_argument("--steps", type=int, default=600)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML scenario/config file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write summary stats.")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        config_path=args.config,
        summary_path=args.summary,
    )


if __name__ == "__main__":
    main()
