"""
Topology Model

Entities of the replication topology graph:

Vertices:
- Site: {id, name, x, y, width, height, background_color}
- DomainController: {id, name, site_id, is_key, x, y}

Edges:
- ReplicationLink (DC - DC, undirected): {id, source_dc, target_dc, is_inter_site}

References between entities are ids. A DC whose site_id is "" (or names a
site that no longer exists) is unassigned. Entities are immutable; the
store swaps in updated copies, so snapshots never alias live state.

Serialized documents use the key names of the topology designer export
(siteId, isKey, sourceDC, targetDC, isInterSite, backgroundColor);
from_dict() also accepts snake_case keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

UNASSIGNED = ""
MAX_LINKS_PER_DC = 4
MIN_LINKS_PER_DC = 2


# =============================================================================
# Enumerations
# =============================================================================

class Severity(str, Enum):
    """Severity of a validation finding"""
    ERROR = "error"
    WARNING = "warning"


class LinkRejection(str, Enum):
    """Why a replication link was not created"""
    SELF_LINK = "self_link"
    DUPLICATE = "duplicate"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    UNKNOWN_DC = "unknown_dc"

    @property
    def description(self) -> str:
        return {
            LinkRejection.SELF_LINK: "a DC cannot replicate with itself",
            LinkRejection.DUPLICATE: "the DCs are already linked",
            LinkRejection.CAPACITY_EXCEEDED: f"a DC already has {MAX_LINKS_PER_DC} links",
            LinkRejection.UNKNOWN_DC: "a DC does not exist",
        }[self]


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# Vertices
# =============================================================================

@dataclass(frozen=True)
class Site:
    """Site vertex grouping domain controllers"""
    id: str
    name: str
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    background_color: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "backgroundColor": self.background_color,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Site":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", data.get("id", "")),
            x=data.get("x"),
            y=data.get("y"),
            width=data.get("width"),
            height=data.get("height"),
            background_color=_pick(data, "backgroundColor", "background_color"),
        )


@dataclass(frozen=True)
class DomainController:
    """Domain controller vertex"""
    id: str
    name: str
    site_id: str = UNASSIGNED
    is_key: bool = False
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def is_assigned(self) -> bool:
        return self.site_id != UNASSIGNED

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "siteId": self.site_id,
            "isKey": self.is_key,
            "x": self.x,
            "y": self.y,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainController":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", data.get("id", "")),
            site_id=_pick(data, "siteId", "site_id", default=UNASSIGNED) or UNASSIGNED,
            is_key=bool(_pick(data, "isKey", "is_key", default=False)),
            x=data.get("x"),
            y=data.get("y"),
        )


# =============================================================================
# Edges
# =============================================================================

@dataclass(frozen=True)
class ReplicationLink:
    """Undirected replication connection between two DCs"""
    id: str
    source_dc: str
    target_dc: str
    is_inter_site: bool = False

    @staticmethod
    def make_id(source_dc: str, target_dc: str) -> str:
        return f"link-{source_dc}-{target_dc}"

    def connects(self, dc_a: str, dc_b: str) -> bool:
        """True if this link joins dc_a and dc_b, in either direction."""
        return {self.source_dc, self.target_dc} == {dc_a, dc_b}

    def touches(self, dc_id: str) -> bool:
        return dc_id in (self.source_dc, self.target_dc)

    def other_end(self, dc_id: str) -> Optional[str]:
        if dc_id == self.source_dc:
            return self.target_dc
        if dc_id == self.target_dc:
            return self.source_dc
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sourceDC": self.source_dc,
            "targetDC": self.target_dc,
            "isInterSite": self.is_inter_site,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReplicationLink":
        source = str(_pick(data, "sourceDC", "source_dc", "source", default=""))
        target = str(_pick(data, "targetDC", "target_dc", "target", default=""))
        return cls(
            id=str(data.get("id") or cls.make_id(source, target)),
            source_dc=source,
            target_dc=target,
            is_inter_site=bool(_pick(data, "isInterSite", "is_inter_site", default=False)),
        )


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class LinkResult:
    """Outcome of TopologyStore.add_link()"""
    link: Optional[ReplicationLink] = None
    rejection: Optional[LinkRejection] = None

    @property
    def created(self) -> bool:
        return self.link is not None

    def __bool__(self) -> bool:
        return self.created


@dataclass(frozen=True)
class ValidationIssue:
    """One finding of the topology validator"""
    severity: Severity
    message: str
    related_ids: List[str] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.severity.value,
            "message": self.message,
            "relatedIds": list(self.related_ids),
        }


# =============================================================================
# Snapshot
# =============================================================================

@dataclass
class TopologyData:
    """Serializable snapshot of a topology"""
    sites: List[Site] = field(default_factory=list)
    dcs: List[DomainController] = field(default_factory=list)
    links: List[ReplicationLink] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sites": [s.to_dict() for s in self.sites],
            "dcs": [d.to_dict() for d in self.dcs],
            "links": [l.to_dict() for l in self.links],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TopologyData":
        data = data or {}
        return cls(
            sites=[Site.from_dict(s) for s in data.get("sites", [])],
            dcs=[DomainController.from_dict(d) for d in data.get("dcs", [])],
            links=[ReplicationLink.from_dict(l) for l in data.get("links", [])],
        )

    def summary(self) -> Dict[str, int]:
        return {
            "sites": len(self.sites),
            "dcs": len(self.dcs),
            "links": len(self.links),
            "inter_site_links": sum(1 for l in self.links if l.is_inter_site),
        }
