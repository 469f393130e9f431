"""
Infrastructure Sizing Engine

Orchestrates the sizing pipeline for one configuration:

1. Site distribution  -> absolute users per site
2. Horizontal scaling -> DCs per site, subsystem servers per site
3. Vertical scaling   -> per-DC and per-subsystem-server specs
4. Aggregation        -> totals and warnings

The calculation is a pure function of its SizingConfig; the engine keeps no
state between calls.

Usage:
    from infra_planner.sizing import SizingConfig, calculate_infrastructure

    result = calculate_infrastructure(SizingConfig(total_users=12000, total_groups=800))
    print(result.site_distribution, result.vertical_specs)
"""

from __future__ import annotations

import logging

from . import formulas
from .aggregator import aggregate_totals, average_load_per_dc, count_dcs, generate_warnings
from .distribution import to_absolute_users
from .models import SizingConfig, SizingResult
from .planner import plan_dcs_per_site, plan_subsystem_distribution


class InfrastructureSizingEngine:
    """Computes SizingResult records from SizingConfig inputs."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def calculate(self, config: SizingConfig) -> SizingResult:
        users_by_site = to_absolute_users(config)
        self.logger.debug(f"Users by site: {users_by_site}")

        site_distribution = plan_dcs_per_site(config, users_by_site)
        total_dcs = count_dcs(site_distribution)
        average_load = average_load_per_dc(config.total_users, total_dcs)
        self.logger.debug(f"DCs by site: {site_distribution} (avg load {average_load:.1f})")

        vertical = formulas.vertical_specs(config, config.total_objects, average_load)
        per_server = formulas.subsystem_specs(config)
        subsystem_distribution = plan_subsystem_distribution(
            config, config.site_names, users_by_site
        )

        totals = aggregate_totals(site_distribution, vertical, per_server, subsystem_distribution)
        subsystem_specs = {
            key: spec.for_servers(totals.total_subsystem_servers.get(key, 0))
            for key, spec in per_server.items()
        }
        warnings = generate_warnings(
            config, site_distribution, average_load, totals.total_subsystem_servers
        )
        for warning in warnings:
            self.logger.info(f"Sizing warning: {warning}")

        return SizingResult(
            site_distribution=site_distribution,
            vertical_specs=vertical,
            subsystem_specs=subsystem_specs,
            subsystem_distribution=subsystem_distribution,
            average_load_per_dc=average_load,
            warnings=warnings,
            total_dcs=totals.total_dcs,
            total_dc_ram=totals.total_dc_ram,
            total_dc_cpu=totals.total_dc_cpu,
            total_dc_disk=totals.total_dc_disk,
            total_subsystem_ram=totals.total_subsystem_ram,
            total_subsystem_cpu=totals.total_subsystem_cpu,
            total_subsystem_disk=totals.total_subsystem_disk,
            total_subsystem_servers=totals.total_subsystem_servers,
        )


def calculate_infrastructure(config: SizingConfig) -> SizingResult:
    """Convenience function running the sizing engine once."""
    return InfrastructureSizingEngine().calculate(config)
