"""
Site Distribution

Converts the user distribution entered per site (percentages or absolute
counts) into absolute integer user counts, and generates the default
distributions used to pre-populate a configuration.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

from .models import (
    DistributionType,
    SizingConfig,
    SubsystemDistribution,
    SubsystemKind,
    parse_count,
    parse_number,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))


def to_absolute_users(config: SizingConfig) -> Dict[str, int]:
    """
    Convert config.site_distributions into absolute users per site.

    In percentage mode the rounding drift is pushed onto the site currently
    holding the most users, so the counts always add up to total_users.
    """
    if config.distribution_type == DistributionType.ABSOLUTE:
        return {site: parse_count(value) for site, value in config.site_distributions.items()}

    result: Dict[str, int] = {}
    allocated = 0
    for site, value in config.site_distributions.items():
        users = round_half_up(parse_number(value) / 100 * config.total_users)
        result[site] = users
        allocated += users

    diff = config.total_users - allocated
    if diff != 0 and result:
        # max() keeps the first site on ties
        largest = max(result, key=lambda site: result[site])
        result[largest] += diff
        logger.debug(f"Rounding drift of {diff} users assigned to {largest}")

    return result


def default_site_names(num_sites: int) -> List[str]:
    return [f"Site {i}" for i in range(1, num_sites + 1)]


def default_site_distribution(num_sites: int) -> Dict[str, str]:
    """Even percentage split, with the integer-division remainder on the first site."""
    if num_sites <= 0:
        return {}
    if num_sites == 1:
        return {"Site 1": "100"}

    base = 100 // num_sites
    remaining = 100 - base * num_sites
    distribution = {}
    for i, name in enumerate(default_site_names(num_sites)):
        distribution[name] = str(base + remaining if i == 0 else base)
    return distribution


def default_subsystem_distribution(
    num_sites: int,
    site_names: Optional[Sequence[str]] = None,
) -> Dict[str, SubsystemDistribution]:
    """One server per subsystem, placed on the first site."""
    names = list(site_names) if site_names else default_site_names(num_sites)
    placement = {name: ("1" if i == 0 else "0") for i, name in enumerate(names)}
    return {
        kind.value: SubsystemDistribution(total_servers=1, site_distribution=dict(placement))
        for kind in SubsystemKind
    }
