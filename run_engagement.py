#!/usr/bin/env python3
"""Run arena scenarios and report what the guidance loop did.

Usage:
    python3 run_engagement.py [--debug] [--json] [scenario_name ...]

If no scenario names given, runs every built-in scenario.
"""

import json
import sys
import time

from loguru import logger

from beamtrack.config import GuidanceSettings, get_settings
from beamtrack.scenarios import SCENARIOS, run_scenario


def run_one(name: str, settings: GuidanceSettings) -> dict:
    """Run one scenario, print its report, return summary."""
    print(f"\n{'='*60}")
    print(f"  SCENARIO: {name}")
    print(f"{'='*60}")

    scenario = SCENARIOS[name]
    print(f"  Description: {scenario.description}")
    print(f"  Ticks: {scenario.ticks} ({scenario.ticks * settings.tick_seconds:.1f}s sim)")
    print(f"  Contacts: {len(scenario.bodies)}, Role: {scenario.ship_class.value}")

    t0 = time.time()
    result = run_scenario(scenario, settings)
    elapsed = time.time() - t0

    print(f"\n  Final state: {result.final_state}")
    print(f"  States visited: {' -> '.join(result.states) or '(none)'}")
    print(f"  Designations: {result.designations}")
    print(f"  Gun shots: {result.guns_fired}  Missiles: {result.missiles_fired}")
    if result.self_destructed:
        print("  Munition detonated")
    print(f"  Wall time: {elapsed:.2f}s")

    summary = result.to_dict()
    summary["status"] = "ok"
    summary["wall_time"] = round(elapsed, 3)
    return summary


def main():
    args = sys.argv[1:]
    debug = "--debug" in args
    as_json = "--json" in args
    names = [a for a in args if not a.startswith("--")] or list(SCENARIOS)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "WARNING")

    settings = get_settings()
    results = []

    for name in names:
        if name not in SCENARIOS:
            print(f"\n  UNKNOWN SCENARIO: {name} (have: {', '.join(SCENARIOS)})")
            results.append({"name": name, "status": "error", "error": "unknown scenario"})
            continue
        results.append(run_one(name, settings))

    print(f"\n\n{'='*60}")
    print("  SUMMARY")
    print(f"{'='*60}")
    for r in results:
        print(f"  {r['name']:20s}  status={r['status']}  "
              f"guns={r.get('guns_fired', 0)}  missiles={r.get('missiles_fired', 0)}  "
              f"final={r.get('final_state')}")
    if as_json:
        print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
