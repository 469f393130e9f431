"""
Topology Store

Owns the mutable replication topology: sites, domain controllers and
replication links, each kept in an id-keyed, insertion-ordered map.

Invariants maintained on mutation:
    - at most one link between any unordered pair of DCs
    - no DC links to itself
    - a DC takes part in at most 4 links
    - removing a DC removes its links first
    - removing a site unassigns its DCs (they are not deleted)

All mutators and compound queries run under one re-entrant lock, so a
can_create_link() check and the link creation it guards see the same state.

Usage:
    store = TopologyStore()
    hq = store.add_site("HQ")
    dc1 = store.add_dc("DC1", hq.id, is_key=True)
    dc2 = store.add_dc("DC2", hq.id)
    result = store.add_link(dc1.id, dc2.id)
    if not result:
        print(result.rejection.description)
    issues = store.validate_topology()
"""

from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import replace
from typing import Any, Dict, List, Optional

import networkx as nx

from .models import (
    MAX_LINKS_PER_DC,
    UNASSIGNED,
    DomainController,
    LinkRejection,
    LinkResult,
    ReplicationLink,
    Site,
    TopologyData,
    ValidationIssue,
)
from .validator import TopologyValidator

DEFAULT_SITE_WIDTH = 300
DEFAULT_SITE_HEIGHT = 200

SITE_FIELDS = ("x", "y", "width", "height", "background_color")
DC_FIELDS = ("name", "site_id", "is_key", "x", "y")


class TopologyStore:
    """In-memory replication topology with guarded mutators."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.logger = logging.getLogger(__name__)
        self._rng = rng or random.Random()
        self._lock = threading.RLock()

        self.sites: Dict[str, Site] = {}
        self.dcs: Dict[str, DomainController] = {}
        self.links: Dict[str, ReplicationLink] = {}
        self.errors: List[ValidationIssue] = []

    # =========================================================================
    # Helpers
    # =========================================================================

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.UUID(int=self._rng.getrandbits(128)).hex[:12]}"

    def pastel_color(self) -> str:
        hue = self._rng.randrange(360)
        return f"hsla({hue}, 70%, 90%, 0.3)"

    def _site_of(self, dc: DomainController) -> str:
        """Site id of a DC, or UNASSIGNED when it points at no existing site."""
        return dc.site_id if dc.site_id in self.sites else UNASSIGNED

    # =========================================================================
    # Sites
    # =========================================================================

    def add_site(self, name: str = "") -> Site:
        with self._lock:
            site = Site(
                id=self._new_id("site"),
                name=name or f"Site {self._rng.randrange(1000)}",
                width=DEFAULT_SITE_WIDTH,
                height=DEFAULT_SITE_HEIGHT,
                background_color=self.pastel_color(),
            )
            self.sites[site.id] = site
            self.logger.info(f"Added site {site.name} ({site.id})")
            return site

    def update_site(
        self,
        site_id: str,
        name: Optional[str] = None,
        position: Optional[Dict[str, Any]] = None,
    ) -> Optional[Site]:
        """
        Merge a new name and/or position fields into a site.

        position may carry any of x, y, width, height, background_color
        (backgroundColor is accepted too); omitted fields are untouched.
        Returns the updated site, or None if it does not exist.
        """
        with self._lock:
            site = self.sites.get(site_id)
            if site is None:
                return None

            changes: Dict[str, Any] = {}
            if name is not None:
                changes["name"] = name
            position = dict(position or {})
            if "backgroundColor" in position:
                position["background_color"] = position.pop("backgroundColor")
            for key, value in position.items():
                if key in SITE_FIELDS and value is not None:
                    changes[key] = value
                elif key not in SITE_FIELDS:
                    self.logger.warning(f"Ignoring unknown site field '{key}'")

            updated = replace(site, **changes)
            self.sites[site_id] = updated
            return updated

    def can_remove_site(self, site_id: str) -> bool:
        """True if no DC is assigned to the site."""
        with self._lock:
            return not self.dcs_in_site(site_id)

    def remove_site(self, site_id: str) -> bool:
        """
        Delete a site, unassigning its DCs.

        Removal is allowed even while DCs are assigned; callers that want to
        forbid it check can_remove_site() first.
        """
        with self._lock:
            if site_id not in self.sites:
                return False
            for dc in self.dcs_in_site(site_id):
                self.dcs[dc.id] = replace(dc, site_id=UNASSIGNED)
                self.logger.debug(f"Unassigned DC {dc.name} from removed site {site_id}")
            site = self.sites.pop(site_id)
            self.logger.info(f"Removed site {site.name} ({site_id})")
            return True

    # =========================================================================
    # Domain controllers
    # =========================================================================

    def add_dc(self, name: str = "", site_id: str = UNASSIGNED, is_key: bool = False) -> DomainController:
        with self._lock:
            dc = DomainController(
                id=self._new_id("dc"),
                name=name or f"DC{self._rng.randrange(100)}",
                site_id=site_id or UNASSIGNED,
                is_key=is_key,
            )
            self.dcs[dc.id] = dc
            self.logger.info(f"Added DC {dc.name} ({dc.id}) to site '{dc.site_id}'")
            return dc

    def update_dc(self, dc_id: str, **changes: Any) -> Optional[DomainController]:
        """Merge the given fields (name, site_id, is_key, x, y) into a DC."""
        with self._lock:
            dc = self.dcs.get(dc_id)
            if dc is None:
                return None
            accepted = {}
            for key, value in changes.items():
                if key not in DC_FIELDS:
                    self.logger.warning(f"Ignoring unknown DC field '{key}'")
                elif key == "site_id":
                    accepted[key] = value or UNASSIGNED
                elif value is not None:
                    accepted[key] = value
            updated = replace(dc, **accepted)
            self.dcs[dc_id] = updated
            return updated

    def remove_dc(self, dc_id: str) -> bool:
        with self._lock:
            if dc_id not in self.dcs:
                return False
            for link in self.links_for_dc(dc_id):
                del self.links[link.id]
            dc = self.dcs.pop(dc_id)
            self.logger.info(f"Removed DC {dc.name} ({dc_id})")
            return True

    # =========================================================================
    # Replication links
    # =========================================================================

    def check_link(self, source_dc: str, target_dc: str) -> Optional[LinkRejection]:
        """Reason a link between the two DCs would be refused, or None."""
        with self._lock:
            if source_dc == target_dc:
                return LinkRejection.SELF_LINK
            if any(link.connects(source_dc, target_dc) for link in self.links.values()):
                return LinkRejection.DUPLICATE
            if (self.get_link_count_for_dc(source_dc) >= MAX_LINKS_PER_DC
                    or self.get_link_count_for_dc(target_dc) >= MAX_LINKS_PER_DC):
                return LinkRejection.CAPACITY_EXCEEDED
            return None

    def can_create_link(self, source_dc: str, target_dc: str) -> bool:
        return self.check_link(source_dc, target_dc) is None

    def add_link(self, source_dc: str, target_dc: str) -> LinkResult:
        with self._lock:
            rejection = self.check_link(source_dc, target_dc)
            source = self.dcs.get(source_dc)
            target = self.dcs.get(target_dc)
            if rejection is None and (source is None or target is None):
                rejection = LinkRejection.UNKNOWN_DC
            if rejection is not None:
                self.logger.warning(
                    f"Rejected link {source_dc} <-> {target_dc}: {rejection.description}"
                )
                return LinkResult(rejection=rejection)

            source_site = self._site_of(source)
            target_site = self._site_of(target)
            link = ReplicationLink(
                id=ReplicationLink.make_id(source_dc, target_dc),
                source_dc=source_dc,
                target_dc=target_dc,
                is_inter_site=(
                    source_site != target_site
                    or source_site == UNASSIGNED
                    or target_site == UNASSIGNED
                ),
            )
            self.links[link.id] = link
            self.logger.info(
                f"Linked {source.name} <-> {target.name}"
                f"{' (inter-site)' if link.is_inter_site else ''}"
            )
            return LinkResult(link=link)

    def remove_link(self, link_id: str) -> bool:
        with self._lock:
            return self.links.pop(link_id, None) is not None

    def get_link_count_for_dc(self, dc_id: str) -> int:
        with self._lock:
            return sum(1 for link in self.links.values() if link.touches(dc_id))

    # =========================================================================
    # Queries
    # =========================================================================

    def get_site(self, site_id: str) -> Optional[Site]:
        return self.sites.get(site_id)

    def get_dc(self, dc_id: str) -> Optional[DomainController]:
        return self.dcs.get(dc_id)

    def get_link(self, link_id: str) -> Optional[ReplicationLink]:
        return self.links.get(link_id)

    def dcs_in_site(self, site_id: str) -> List[DomainController]:
        with self._lock:
            return [dc for dc in self.dcs.values() if dc.site_id == site_id]

    def unassigned_dcs(self) -> List[DomainController]:
        with self._lock:
            return [dc for dc in self.dcs.values() if self._site_of(dc) == UNASSIGNED]

    def links_for_dc(self, dc_id: str) -> List[ReplicationLink]:
        with self._lock:
            return [link for link in self.links.values() if link.touches(dc_id)]

    def replication_partners(self, dc_id: str) -> List[DomainController]:
        """DCs linked to dc_id; partners that no longer exist are skipped."""
        with self._lock:
            partners = []
            for link in self.links_for_dc(dc_id):
                partner = self.dcs.get(link.other_end(dc_id))
                if partner is not None:
                    partners.append(partner)
            return partners

    def to_networkx(self) -> nx.Graph:
        """Undirected DC graph; nodes carry name/site_id/is_key, edges carry the link."""
        with self._lock:
            G = nx.Graph()
            for dc in self.dcs.values():
                G.add_node(dc.id, name=dc.name, site_id=self._site_of(dc), is_key=dc.is_key)
            for link in self.links.values():
                if link.source_dc in self.dcs and link.target_dc in self.dcs:
                    G.add_edge(
                        link.source_dc,
                        link.target_dc,
                        id=link.id,
                        is_inter_site=link.is_inter_site,
                    )
            return G

    # =========================================================================
    # Validation and snapshots
    # =========================================================================

    def validate_topology(self) -> List[ValidationIssue]:
        """Validate the current state; the findings replace self.errors."""
        with self._lock:
            issues = TopologyValidator(self.export_topology()).validate()
            self.errors = issues
            return list(issues)

    def export_topology(self) -> TopologyData:
        with self._lock:
            return TopologyData(
                sites=list(self.sites.values()),
                dcs=list(self.dcs.values()),
                links=list(self.links.values()),
            )

    def import_topology(self, data: TopologyData) -> None:
        """Replace the whole state with a snapshot (no merge)."""
        with self._lock:
            self.sites = {site.id: site for site in data.sites}
            self.dcs = {dc.id: dc for dc in data.dcs}
            self.links = {link.id: link for link in data.links}
            self.errors = []
            self.logger.info(
                f"Imported topology: {len(self.sites)} sites, {len(self.dcs)} DCs, "
                f"{len(self.links)} links"
            )
