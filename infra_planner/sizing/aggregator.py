"""
Sizing Aggregator

Rolls per-unit specs and per-site counts up into deployment totals and
produces advisory warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .models import ResourceSpec, SizingConfig, SubsystemSpec

MAX_DCS_PER_SITE = 10
MAX_LOAD_PER_DC = 10000


@dataclass(frozen=True)
class SizingTotals:
    """Grand totals of a deployment"""
    total_dcs: int = 0
    total_dc_ram: int = 0
    total_dc_cpu: int = 0
    total_dc_disk: int = 0
    total_subsystem_ram: int = 0
    total_subsystem_cpu: int = 0
    total_subsystem_disk: int = 0
    total_subsystem_servers: Dict[str, int] = field(default_factory=dict)


def count_dcs(site_distribution: Dict[str, int]) -> int:
    return sum(site_distribution.values())


def average_load_per_dc(total_users: int, total_dcs: int) -> float:
    """Users per DC; 0 when no DC is deployed. Not rounded."""
    return total_users / total_dcs if total_dcs > 0 else 0


def aggregate_totals(
    site_distribution: Dict[str, int],
    vertical_specs: ResourceSpec,
    subsystem_specs: Dict[str, SubsystemSpec],
    subsystem_distribution: Dict[str, Dict[str, int]],
) -> SizingTotals:
    """
    Sum DC and subsystem resources.

    Subsystem specs are per server, so each one is multiplied by the number
    of servers deployed for it.
    """
    total_dcs = count_dcs(site_distribution)

    ram = cpu = disk = 0
    servers: Dict[str, int] = {}
    for key, spec in subsystem_specs.items():
        count = sum(subsystem_distribution.get(key, {}).values())
        servers[key] = count
        ram += spec.ram_gb * count
        cpu += spec.cpu_cores * count
        disk += spec.disk_gb * count

    return SizingTotals(
        total_dcs=total_dcs,
        total_dc_ram=total_dcs * vertical_specs.ram_gb,
        total_dc_cpu=total_dcs * vertical_specs.cpu_cores,
        total_dc_disk=total_dcs * vertical_specs.disk_gb,
        total_subsystem_ram=ram,
        total_subsystem_cpu=cpu,
        total_subsystem_disk=disk,
        total_subsystem_servers=servers,
    )


def generate_warnings(
    config: SizingConfig,
    site_distribution: Dict[str, int],
    average_load: float,
    subsystem_servers: Dict[str, int],
) -> List[str]:
    warnings: List[str] = []

    for site, dc_count in site_distribution.items():
        if dc_count > MAX_DCS_PER_SITE:
            warnings.append(
                f"Site '{site}' has {dc_count} DCs, which exceeds the recommended "
                f"maximum of {MAX_DCS_PER_SITE}."
            )

    if average_load > MAX_LOAD_PER_DC:
        warnings.append(
            f"Average load of {average_load:.0f} users per DC exceeds the recommended "
            f"maximum of {MAX_LOAD_PER_DC:,}."
        )

    for kind in config.enabled_subsystems():
        if subsystem_servers.get(kind.value, 0) == 0:
            warnings.append(
                f"Subsystem '{kind.value}' is enabled but has no servers allocated."
            )

    return warnings
