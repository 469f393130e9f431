"""
Horizontal Scaling Planner

Decides how many domain controllers each site needs and where subsystem
servers are placed.

DC placement modes:
    Manual    : a fixed total (custom_dc_count) split by user share, every
                populated site reserved one DC first
    Automatic : ceil(users / target) per site, raised to the HA floor

HA floor:
    Multi-site  : populated sites get at least 2 DCs, empty sites 0
    Single site : at least 2 DCs, or 1 when the site has no users
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence

from .models import DCLoadModel, SizingConfig, parse_count

logger = logging.getLogger(__name__)

DEFAULT_USERS_PER_DC = 2000
HA_MIN_DCS = 2


def effective_load_target(config: SizingConfig) -> int:
    """Users per DC used by the automatic mode."""
    if config.dc_load_model == DCLoadModel.CUSTOM and config.users_per_dc_target > 0:
        return config.users_per_dc_target
    return DEFAULT_USERS_PER_DC


def plan_dcs_per_site(config: SizingConfig, users_by_site: Dict[str, int]) -> Dict[str, int]:
    if config.custom_dc_count:
        return _distribute_fixed_dc_count(config.custom_dc_count, config.total_users, users_by_site)
    return _plan_automatic(config, users_by_site)


def _plan_automatic(config: SizingConfig, users_by_site: Dict[str, int]) -> Dict[str, int]:
    target = effective_load_target(config)
    multi_site = len(users_by_site) > 1
    logger.debug(f"Automatic DC planning: target={target} users/DC, multi_site={multi_site}")

    distribution: Dict[str, int] = {}
    for site, users in users_by_site.items():
        required = math.ceil(users / target)
        if multi_site:
            required = max(required, HA_MIN_DCS) if users > 0 else 0
        else:
            required = 1 if users == 0 else max(required, HA_MIN_DCS)
        distribution[site] = required
    return distribution


def _distribute_fixed_dc_count(
    dc_count: int,
    total_users: int,
    users_by_site: Dict[str, int],
) -> Dict[str, int]:
    """
    Split a fixed number of DCs across sites in proportion to their users.

    Steps:
    1. Reserve one DC for every populated site.
    2. In insertion order, give each populated site
       floor(users / remaining_users * remaining_dcs); both pools shrink
       after every site.
    3. Hand leftovers out one at a time over populated sites, most users
       first, until none are left.
    """
    distribution: Dict[str, int] = {}
    remaining_dcs = dc_count
    remaining_users = total_users

    for site, users in users_by_site.items():
        if users > 0:
            distribution[site] = 1
            remaining_dcs -= 1
        else:
            distribution[site] = 0

    for site, users in users_by_site.items():
        if users <= 0 or remaining_dcs <= 0:
            continue
        if remaining_users > 0:
            share = math.floor(users / remaining_users * remaining_dcs)
        else:
            share = remaining_dcs
        distribution[site] += share
        remaining_dcs -= share
        remaining_users -= users

    # Empty sites only share leftovers when no site has users
    populated = {site: users for site, users in users_by_site.items() if users > 0}
    by_users = sites_by_users(populated or users_by_site)
    while remaining_dcs > 0 and by_users:
        for site in by_users:
            if remaining_dcs <= 0:
                break
            distribution[site] += 1
            remaining_dcs -= 1

    logger.debug(f"Distributed {dc_count} fixed DCs: {distribution}")
    return distribution


def plan_subsystem_distribution(
    config: SizingConfig,
    site_names: Sequence[str],
    users_by_site: Dict[str, int],
) -> Dict[str, Dict[str, int]]:
    """Servers per site for every enabled subsystem."""
    plan: Dict[str, Dict[str, int]] = {}
    for kind in config.enabled_subsystems():
        override = config.subsystem_override(kind)
        if override is not None:
            plan[kind.value] = _custom_subsystem_placement(
                override.total_servers, override.site_distribution, site_names, users_by_site
            )
        else:
            plan[kind.value] = _auto_subsystem_placement(site_names, users_by_site)
    return plan


def _custom_subsystem_placement(
    total_servers: int,
    site_distribution: Dict[str, str],
    site_names: Sequence[str],
    users_by_site: Dict[str, int],
) -> Dict[str, int]:
    placement = {site: parse_count(site_distribution.get(site, "0")) for site in site_names}
    discrepancy = total_servers - sum(placement.values())
    if discrepancy != 0 and placement:
        busiest = max(site_names, key=lambda site: users_by_site.get(site, 0))
        placement[busiest] += discrepancy
        logger.debug(f"Subsystem server discrepancy of {discrepancy} assigned to {busiest}")
    return placement


def _auto_subsystem_placement(
    site_names: Sequence[str],
    users_by_site: Dict[str, int],
) -> Dict[str, int]:
    placement = {site: (1 if users_by_site.get(site, 0) > 0 else 0) for site in site_names}
    if site_names and sum(placement.values()) == 0:
        placement[site_names[0]] = 1
    return placement


def sites_by_users(users_by_site: Dict[str, int]) -> List[str]:
    """Site names ordered by descending user count (stable on ties)."""
    return sorted(users_by_site, key=lambda site: users_by_site[site], reverse=True)
