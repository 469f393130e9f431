"""
Dependency Injection Container

Hands out the topology store and sizing engine shared by one session, so
collaborators receive them explicitly instead of through module globals.
"""

from dataclasses import dataclass, field
from typing import Optional

from .settings import Settings

from infra_planner.sizing.engine import InfrastructureSizingEngine
from infra_planner.topology.store import TopologyStore


@dataclass
class Container:
    """Per-session service container"""
    settings: Settings = field(default_factory=Settings)

    _store: Optional[TopologyStore] = field(default=None, repr=False)
    _engine: Optional[InfrastructureSizingEngine] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Container":
        return cls(settings=settings)

    def topology_store(self) -> TopologyStore:
        """Get the topology store of this container."""
        if self._store is None:
            self._store = TopologyStore()
        return self._store

    def sizing_engine(self) -> InfrastructureSizingEngine:
        if self._engine is None:
            self._engine = InfrastructureSizingEngine()
        return self._engine
