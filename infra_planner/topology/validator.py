"""
Topology Validator

Checks a replication topology snapshot against the design rules:

1. Redundancy  : with more than one DC, every DC needs at least 2 links
2. Capacity    : no DC may carry more than 4 links
3. Connectivity: all sites hosting DCs must be reachable from each other
                 over inter-site links

Connectivity is checked on an undirected NetworkX graph whose vertices are
the sites that host at least one DC and whose edges are links between DCs of
two different sites. Links touching unassigned DCs do not connect sites.

Findings are returned as ValidationIssue records; nothing raises.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List

import networkx as nx

from .models import (
    MAX_LINKS_PER_DC,
    MIN_LINKS_PER_DC,
    UNASSIGNED,
    DomainController,
    Severity,
    Site,
    TopologyData,
    ValidationIssue,
)


def link_counts(data: TopologyData) -> Counter:
    """Number of links per DC id (DCs without links are absent)."""
    counts: Counter = Counter()
    for link in data.links:
        counts[link.source_dc] += 1
        counts[link.target_dc] += 1
    return counts


def build_site_graph(data: TopologyData) -> nx.Graph:
    """
    Undirected graph of the sites hosting DCs, connected by inter-site links.

    Vertices keep the site insertion order and carry the site name.
    """
    dcs: Dict[str, DomainController] = {dc.id: dc for dc in data.dcs}
    hosting = {dc.site_id for dc in data.dcs if dc.site_id != UNASSIGNED}

    G = nx.Graph()
    for site in data.sites:
        if site.id in hosting:
            G.add_node(site.id, name=site.name)

    for link in data.links:
        source = dcs.get(link.source_dc)
        target = dcs.get(link.target_dc)
        if source is None or target is None:
            continue
        if UNASSIGNED in (source.site_id, target.site_id) or source.site_id == target.site_id:
            continue
        if source.site_id in G and target.site_id in G:
            G.add_edge(source.site_id, target.site_id)
    return G


class TopologyValidator:
    """Validates a TopologyData snapshot."""

    def __init__(self, data: TopologyData):
        self.data = data
        self.logger = logging.getLogger(__name__)

    def validate(self) -> List[ValidationIssue]:
        counts = link_counts(self.data)
        issues: List[ValidationIssue] = []
        issues.extend(self._check_redundancy(counts))
        issues.extend(self._check_capacity(counts))
        issues.extend(self._check_connectivity())

        self.logger.info(
            f"Validated {len(self.data.dcs)} DCs, {len(self.data.links)} links: "
            f"{len(issues)} issue(s)"
        )
        return issues

    def _check_redundancy(self, counts: Counter) -> List[ValidationIssue]:
        if len(self.data.dcs) <= 1:
            return []
        return [
            ValidationIssue(
                severity=Severity.ERROR,
                message=(
                    f'DC "{dc.name}" has fewer than {MIN_LINKS_PER_DC} replication links '
                    f"({counts[dc.id]})"
                ),
                related_ids=[dc.id],
            )
            for dc in self.data.dcs
            if counts[dc.id] < MIN_LINKS_PER_DC
        ]

    def _check_capacity(self, counts: Counter) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=Severity.ERROR,
                message=(
                    f'DC "{dc.name}" exceeds maximum of {MAX_LINKS_PER_DC} replication links '
                    f"({counts[dc.id]})"
                ),
                related_ids=[dc.id],
            )
            for dc in self.data.dcs
            if counts[dc.id] > MAX_LINKS_PER_DC
        ]

    def _check_connectivity(self) -> List[ValidationIssue]:
        G = build_site_graph(self.data)
        if G.number_of_nodes() <= 1:
            return []

        start = next(iter(G.nodes))
        reached = set(nx.dfs_preorder_nodes(G, source=start))
        unreached: List[Site] = [
            site for site in self.data.sites if site.id in G and site.id not in reached
        ]
        if not unreached:
            return []

        self.logger.debug(f"Sites unreachable from {start}: {[s.id for s in unreached]}")
        return [
            ValidationIssue(
                severity=Severity.ERROR,
                message=(
                    "Not all sites are connected. Unreachable sites: "
                    + ", ".join(site.name for site in unreached)
                ),
                related_ids=[site.id for site in unreached],
            )
        ]


def validate_topology(data: TopologyData) -> List[ValidationIssue]:
    """Convenience function validating a snapshot once."""
    return TopologyValidator(data).validate()
