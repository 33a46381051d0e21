"""
Command line interface.

    fmsim run scenario.json [--years N] [--seed S] [--events K] [-v]
    fmsim shell [--seed S]

``run`` simulates a JSON scenario and prints the report. ``shell`` is the
interactive menu: add machine types and adjuster groups, run, then inspect
details.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence, TextIO

from fmsim import __version__
from fmsim.catalog import MAX_ADJUSTERS, MAX_DAYS, MAX_QUANTITY
from fmsim.config import MAX_YEARS, SimulationConfig, load_scenario
from fmsim.errors import FactorySimError
from fmsim.log_cfg import LogConfig
from fmsim.report import render_adjuster_details, render_machine_details, render_report
from fmsim.simulator import FactorySimulator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 2


class Shell:
    """Text menu around a FactorySimulator."""

    def __init__(
        self,
        simulator: FactorySimulator,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self.simulator = simulator
        self._input = input_fn
        self._out = out if out is not None else sys.stdout

    def say(self, text: str = "") -> None:
        print(text, file=self._out)

    def ask_text(self, prompt: str) -> str:
        while True:
            value = self._input(prompt).strip()
            if value:
                return value
            self.say("Input cannot be empty. Try again.")

    def ask_int(self, prompt: str, lo: int, hi: int) -> int:
        while True:
            raw = self._input(prompt).strip()
            try:
                value = int(raw)
            except ValueError:
                self.say("Invalid input. Please enter an integer.")
                continue
            if value < lo or value > hi:
                self.say(f"Input must be between {lo} and {hi}.")
                continue
            return value

    def add_machine_type(self) -> None:
        catalog = self.simulator.catalog
        self.say("\n-- Add Machine Type --")
        name = self.ask_text("Enter machine type name: ")
        if catalog.has_machine_type(name):
            self.say("Machine type with this name already exists.")
            return
        mttf = self.ask_int("Enter MTTF (days) (>=1): ", 1, MAX_DAYS)
        repair = self.ask_int("Enter Repair Time (days) (>=1): ", 1, MAX_DAYS)
        quantity = self.ask_int(f"Enter Quantity (1-{MAX_QUANTITY}): ", 1, MAX_QUANTITY)
        catalog.add_machine_type(name, mttf, repair, quantity)
        self.say(f'Machine type "{name}" added successfully.')

    def add_adjuster_group(self) -> None:
        catalog = self.simulator.catalog
        if not catalog.machine_types:
            self.say("Add at least one machine type before adding adjusters.")
            return
        self.say("\n-- Add Adjuster Group --")
        group_id = self.ask_text("Enter Adjuster Group ID: ")
        if catalog.has_adjuster_group(group_id):
            self.say("Adjuster group with this ID already exists.")
            return
        count = self.ask_int(f"Enter Number of Adjusters (1-{MAX_ADJUSTERS}): ", 1, MAX_ADJUSTERS)

        self.say("Available machine types:")
        for i, mt in enumerate(catalog.machine_types, start=1):
            self.say(f"{i}. {mt.name}")
        self.say(
            "Select machine types serviced by this adjuster group "
            "(enter numbers separated by space):"
        )
        while True:
            try:
                names = catalog.select_machine_types(self._input("Selection: "))
                break
            except FactorySimError:
                self.say("Invalid selection. Try again.")

        catalog.add_adjuster_group(group_id, count, names)
        self.say(f'Adjuster group "{group_id}" added successfully.')

    def run_simulation(self) -> None:
        try:
            self.simulator.check_ready()
        except FactorySimError as exc:
            self.say(f"Error: {exc}.")
            return
        years = self.ask_int("Enter number of years to simulate (>=1): ", 1, MAX_YEARS)
        days = years * self.simulator.config.days_per_year
        self.say(f"\nStarting simulation for {years} year(s) ({days} days)...")
        result = self.simulator.run(years)
        self.say()
        self.say(render_report(result, self.simulator.config.recent_events))
        self.details_menu()

    def details_menu(self) -> None:
        while True:
            self.say("\nView Details:\n1. Machine Types\n2. Adjuster Groups\n3. Exit")
            choice = self.ask_int("Select option: ", 1, 3)
            if choice == 3:
                return
            if choice == 1:
                self.show_machine_details()
            else:
                self.show_adjuster_details()

    def show_machine_details(self) -> None:
        machine_types = self.simulator.catalog.machine_types
        if not machine_types:
            self.say("No machine types.")
            return
        self.say("Machine Types:")
        for i, mt in enumerate(machine_types, start=1):
            self.say(f"{i}. {mt.name}")
        index = self.ask_int("Select machine type: ", 1, len(machine_types))
        details = self.simulator.machine_details(machine_types[index - 1].name)
        self.say()
        self.say(render_machine_details(details))

    def show_adjuster_details(self) -> None:
        groups = self.simulator.catalog.adjuster_groups
        if not groups:
            self.say("No adjuster groups.")
            return
        self.say("Adjuster Groups:")
        for i, group in enumerate(groups, start=1):
            self.say(f"{i}. {group.id}")
        index = self.ask_int("Select adjuster group: ", 1, len(groups))
        details = self.simulator.adjuster_details(groups[index - 1].id)
        self.say()
        self.say(render_adjuster_details(details))

    def loop(self) -> None:
        actions = {
            1: self.add_machine_type,
            2: self.add_adjuster_group,
            3: self.run_simulation,
        }
        while True:
            self.say("\n=== Factory Maintenance Optimization Simulator ===")
            self.say("1. Add Machine Type\n2. Add Adjuster Group\n3. Run Simulation\n4. Exit")
            try:
                choice = self.ask_int("Select option: ", 1, 4)
                if choice == 4:
                    self.say("Goodbye!")
                    return
                actions[choice]()
            except EOFError:
                self.say()
                return


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fmsim",
        description="Factory maintenance simulator: machine failures, repair queue and adjusters.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for progress, -vv for every simulation event")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="simulate a JSON scenario and print the report")
    run.add_argument("scenario", help="path to the scenario JSON file")
    run.add_argument("--years", type=int, help="years to simulate (overrides the scenario)")
    run.add_argument("--seed", type=int, help="seed for the failure clock")
    run.add_argument("--events", type=int, help="number of recent events to print")

    shell = sub.add_parser("shell", help="interactive menu")
    shell.add_argument("--seed", type=int, help="seed for the failure clock")
    return parser


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def _run(args: argparse.Namespace) -> int:
    catalog, config = load_scenario(args.scenario)
    logger.info("Loaded scenario %s", args.scenario)
    config = config.with_overrides(years=args.years, seed=args.seed, recent_events=args.events)
    simulator = FactorySimulator(catalog, config)
    result = simulator.run()
    print(render_report(result, config.recent_events))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    LogConfig(console_level=_log_level(args.verbose))

    try:
        if args.command == "run":
            return _run(args)
        Shell(FactorySimulator(config=SimulationConfig(seed=args.seed))).loop()
        return EXIT_OK
    except (FactorySimError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CONFIG


if __name__ == "__main__":
    sys.exit(main())
