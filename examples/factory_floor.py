"""
Factory floor what-if example.

Runs the same machine park with one, two and three adjusters in a
general-purpose group and prints how the repair queue and utilization
respond.

Demonstrates:
- Building a Catalog in code
- Seeded, reproducible runs
- Reading SimulationStats and the detail views

Run with --report to print the full result screen of the last run.
"""

from __future__ import annotations

import sys

from fmsim import Catalog, FactorySimulator, SimulationConfig
from fmsim.report import render_machine_details, render_report


def build_catalog(floaters: int) -> Catalog:
    catalog = Catalog()
    catalog.add_machine_type("Lathe", 120, 3, 12)
    catalog.add_machine_type("Mill", 90, 5, 6)
    catalog.add_machine_type("Press", 365, 10, 2)
    catalog.add_adjuster_group("Turners", 1, ["Lathe"])
    catalog.add_adjuster_group("Floaters", floaters, ["Lathe", "Mill", "Press"])
    return catalog


def main() -> None:
    show_report = "--report" in sys.argv

    print(f"{'Floaters':<10}{'Max queue':<12}{'Avg queue':<12}{'Machine %':<12}{'Adjuster %':<12}")
    simulator = None
    for floaters in (1, 2, 3):
        simulator = FactorySimulator(build_catalog(floaters), SimulationConfig(years=5, seed=7))
        stats = simulator.run().stats
        print(
            f"{floaters:<10}{stats.max_queue_depth:<12}{stats.mean_queue_depth:<12.2f}"
            f"{stats.machine_utilization_pct:<12.2f}{stats.adjuster_utilization_pct:<12.2f}"
        )

    if show_report and simulator is not None:
        print()
        print(render_report(simulator.result))
        print()
        print(render_machine_details(simulator.machine_details("Lathe")))


if __name__ == "__main__":
    main()
