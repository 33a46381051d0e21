"""
Plain-text rendering of results and detail views.
"""

from __future__ import annotations

from fmsim.config import RECENT_EVENTS
from fmsim.simulator import AdjusterGroupDetails, MachineTypeDetails, SimulationResult

RULE = "-" * 60


def render_report(result: SimulationResult, recent: int = RECENT_EVENTS) -> str:
    """Result screen: utilization tables, max queue length and recent events."""
    stats = result.stats
    lines = ["=== Simulation Results ===", "", "Machine Utilization:"]
    lines.append(f"{'Machine Type':<25}{'Quantity':<15}{'Estimated Uptime(%)':<20}")
    lines.append(RULE)
    for mt in stats.machine_types:
        lines.append(f"{mt.name:<25}{mt.quantity:<15}{mt.uptime_pct:<20.2f}".rstrip())
    lines.append("")
    lines.append(f"Overall machine utilization: {stats.machine_utilization_pct:.2f}%")

    lines += ["", "Adjuster Utilization:"]
    lines.append(f"{'Adjuster ID':<15}{'Count':<15}{'Estimated Utilization(%)':<25}")
    lines.append(RULE)
    for group in stats.adjuster_groups:
        lines.append(f"{group.id:<15}{group.count:<15}{group.utilization_pct:<25.2f}".rstrip())
    lines.append("")
    lines.append(f"Overall adjuster utilization: {stats.adjuster_utilization_pct:.2f}%")

    lines.append("")
    lines.append(f"Max repair queue length during simulation: {stats.max_queue_depth}")
    lines.append(f"Average repair queue length: {stats.mean_queue_depth:.2f}")

    events = result.recent_events(recent)
    if events:
        lines += ["", f"Recent Simulation Events (last {recent}):"]
        lines += [str(event) for event in events]
    return "\n".join(lines)


def render_machine_details(details: MachineTypeDetails) -> str:
    lines = [
        f"Details of machine: {details.name}",
        f"MTTF (days): {details.mttf_days}",
        f"Repair time (days): {details.repair_days}",
        f"Quantity: {details.quantity}",
    ]
    if details.working is None:
        lines.append("No instances available.")
    else:
        lines.append(f"Currently working: {details.working}")
        lines.append(f"Currently broken/repairing: {details.broken}")
    return "\n".join(lines)


def render_adjuster_details(details: AdjusterGroupDetails) -> str:
    lines = [
        f"Adjuster Group: {details.id}",
        f"Count: {details.count}",
        "Services machine types:",
    ]
    lines += [f"  - {name}" for name in details.machine_types]
    if details.busy is None:
        lines.append("No adjuster instances available.")
    else:
        lines.append(f"Currently busy: {details.busy}")
        lines.append(f"Currently idle: {details.idle}")
    return "\n".join(lines)
