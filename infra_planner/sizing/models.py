"""
Sizing Models

Data structures for the infrastructure sizing engine:

Input:
- SizingConfig: user/group counts, site layout, DC load model, feature flags
- SubsystemDistribution: manual per-site server counts for one subsystem

Output:
- ResourceSpec: per-DC hardware specification
- SubsystemSpec: per-server specification of an auxiliary subsystem
- SizingResult: complete calculation record

Field names match the keys used by the configuration UI and by exported
results, so to_dict()/from_dict() round-trip those documents directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# Enumerations
# =============================================================================

class DistributionType(str, Enum):
    """How site_distributions values are interpreted"""
    PERCENTAGES = "percentages"
    ABSOLUTE = "absolute"

    @classmethod
    def from_value(cls, value: Any) -> "DistributionType":
        try:
            return cls(value)
        except ValueError:
            return cls.PERCENTAGES


class DCLoadModel(str, Enum):
    """Users-per-DC load model"""
    DEFAULT = "default"
    HIGH_DENSITY = "high_density"
    CUSTOM = "custom"

    @classmethod
    def from_value(cls, value: Any) -> "DCLoadModel":
        try:
            return cls(value)
        except ValueError:
            return cls.DEFAULT


class SubsystemKind(str, Enum):
    """Auxiliary services sized independently of the DCs"""
    MONITORING = "monitoring"
    JOURNALING = "journaling"
    REPOSITORY = "repository"
    OS_INSTALLATION = "os_installation"
    PRINTING = "printing"
    FILE_SHARING = "file_sharing"
    DHCP = "dhcp"

    @property
    def flag_name(self) -> str:
        """Name of the SizingConfig flag enabling this subsystem"""
        return f"subsystem_{self.value}"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


# =============================================================================
# Parsing helpers
# =============================================================================

def parse_number(value: Any) -> float:
    """Parse a string-encoded number, returning 0.0 for anything unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip())
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_count(value: Any) -> int:
    """Parse a string-encoded integer count (fractions truncate, junk -> 0)."""
    if value is None or isinstance(value, bool):
        return 0
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return int(parse_number(text))


TRUE_STRINGS = ("true", "yes", "on", "1")


def parse_flag(value: Any, default: bool = False) -> bool:
    """Parse a boolean flag; strings such as "false" or "0" are False."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


# =============================================================================
# Input
# =============================================================================

@dataclass(frozen=True)
class SubsystemDistribution:
    """Manually specified server placement for one subsystem"""
    total_servers: int = 1
    site_distribution: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_servers": self.total_servers,
            "site_distribution": dict(self.site_distribution),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubsystemDistribution":
        if not data:
            return cls()
        return cls(
            total_servers=parse_count(data.get("total_servers", 1)),
            site_distribution={
                str(site): str(count)
                for site, count in (data.get("site_distribution") or {}).items()
            },
        )


@dataclass(frozen=True)
class SizingConfig:
    """
    Input of one sizing calculation.

    Attributes:
        total_users: Number of user accounts in the directory
        total_groups: Number of groups in the directory
        num_sites: Number of sites the form was built for
        distribution_type: percentages or absolute user counts per site
        site_distributions: site name -> string-encoded value, in display order
        dc_load_model: default, high_density or custom
        users_per_dc_target: Load target used by the custom model
        custom_dc_count: Fixed total of DCs to distribute, if set
        custom_subsystem_distribution: Honor subsystem_distributions overrides
    """
    total_users: int = 1000
    total_groups: int = 100
    num_sites: int = 1
    distribution_type: DistributionType = DistributionType.PERCENTAGES
    site_distributions: Dict[str, str] = field(default_factory=lambda: {"Site 1": "100"})
    dc_load_model: DCLoadModel = DCLoadModel.DEFAULT
    users_per_dc_target: int = 2000
    custom_dc_count: Optional[int] = None

    # Feature flags
    enable_gc: bool = True
    enable_sync: bool = True

    # Subsystems
    subsystem_monitoring: bool = False
    subsystem_journaling: bool = False
    subsystem_repository: bool = False
    subsystem_os_installation: bool = False
    subsystem_printing: bool = False
    subsystem_file_sharing: bool = False
    subsystem_dhcp: bool = False
    custom_subsystem_distribution: bool = False
    subsystem_distributions: Dict[str, SubsystemDistribution] = field(default_factory=dict)

    @property
    def total_objects(self) -> int:
        return self.total_users + self.total_groups

    @property
    def site_names(self) -> List[str]:
        return list(self.site_distributions)

    def is_subsystem_enabled(self, kind: SubsystemKind) -> bool:
        return bool(getattr(self, kind.flag_name))

    def enabled_subsystems(self) -> List[SubsystemKind]:
        """Enabled subsystems in canonical order"""
        return [kind for kind in SubsystemKind if self.is_subsystem_enabled(kind)]

    def subsystem_override(self, kind: SubsystemKind) -> Optional[SubsystemDistribution]:
        """Manual distribution for a subsystem, when overrides are switched on."""
        if not self.custom_subsystem_distribution:
            return None
        return self.subsystem_distributions.get(kind.value)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "total_users": self.total_users,
            "total_groups": self.total_groups,
            "num_sites": self.num_sites,
            "distribution_type": self.distribution_type.value,
            "site_distributions": dict(self.site_distributions),
            "dc_load_model": self.dc_load_model.value,
            "users_per_dc_target": self.users_per_dc_target,
            "enable_gc": self.enable_gc,
            "enable_sync": self.enable_sync,
        }
        if self.custom_dc_count is not None:
            result["custom_dc_count"] = self.custom_dc_count
        for kind in SubsystemKind:
            result[kind.flag_name] = self.is_subsystem_enabled(kind)
        result["custom_subsystem_distribution"] = self.custom_subsystem_distribution
        if self.subsystem_distributions:
            result["subsystem_distributions"] = {
                key: dist.to_dict() for key, dist in self.subsystem_distributions.items()
            }
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SizingConfig":
        """Create a SizingConfig from a form/config document, defaulting bad values."""
        data = data or {}
        site_distributions = data.get("site_distributions")
        if site_distributions is None:
            site_distributions = {"Site 1": "100"}
        custom_dc_count = data.get("custom_dc_count")
        flags = {
            kind.flag_name: parse_flag(data.get(kind.flag_name), False)
            for kind in SubsystemKind
        }
        return cls(
            total_users=parse_count(data.get("total_users", 1000)),
            total_groups=parse_count(data.get("total_groups", 100)),
            num_sites=parse_count(data.get("num_sites", len(site_distributions) or 1)),
            distribution_type=DistributionType.from_value(data.get("distribution_type")),
            site_distributions={str(k): str(v) for k, v in site_distributions.items()},
            dc_load_model=DCLoadModel.from_value(data.get("dc_load_model")),
            users_per_dc_target=parse_count(data.get("users_per_dc_target", 2000)),
            custom_dc_count=parse_count(custom_dc_count) if custom_dc_count not in (None, "") else None,
            enable_gc=parse_flag(data.get("enable_gc"), True),
            enable_sync=parse_flag(data.get("enable_sync"), True),
            custom_subsystem_distribution=parse_flag(data.get("custom_subsystem_distribution"), False),
            subsystem_distributions={
                str(key): SubsystemDistribution.from_dict(value)
                for key, value in (data.get("subsystem_distributions") or {}).items()
            },
            **flags,
        )


# =============================================================================
# Output
# =============================================================================

@dataclass(frozen=True)
class ResourceSpec:
    """Per-DC hardware specification"""
    ram_gb: int
    disk_gb: int
    cpu_cores: int
    cpu_freq_ghz: float
    disk_type: str
    network_mbps: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ram_gb": self.ram_gb,
            "disk_gb": self.disk_gb,
            "cpu_cores": self.cpu_cores,
            "cpu_freq_ghz": self.cpu_freq_ghz,
            "disk_type": self.disk_type,
            "network_mbps": self.network_mbps,
        }


@dataclass(frozen=True)
class SubsystemDeployment:
    """Footprint of a subsystem across all of its servers"""
    server_count: int
    total_ram_gb: int
    total_cpu_cores: int
    total_disk_gb: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "server_count": self.server_count,
            "total_ram_gb": self.total_ram_gb,
            "total_cpu_cores": self.total_cpu_cores,
            "total_disk_gb": self.total_disk_gb,
        }


@dataclass(frozen=True)
class SubsystemSpec:
    """Per-server specification of one subsystem"""
    ram_gb: int
    cpu_cores: int
    disk_gb: int
    disk_type: str
    network_mbps: int
    deployment: Optional[SubsystemDeployment] = None

    def for_servers(self, server_count: int) -> "SubsystemSpec":
        """Copy of this spec carrying the deployment breakdown for server_count servers."""
        return SubsystemSpec(
            ram_gb=self.ram_gb,
            cpu_cores=self.cpu_cores,
            disk_gb=self.disk_gb,
            disk_type=self.disk_type,
            network_mbps=self.network_mbps,
            deployment=SubsystemDeployment(
                server_count=server_count,
                total_ram_gb=self.ram_gb * server_count,
                total_cpu_cores=self.cpu_cores * server_count,
                total_disk_gb=self.disk_gb * server_count,
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "ram_gb": self.ram_gb,
            "cpu_cores": self.cpu_cores,
            "disk_gb": self.disk_gb,
            "disk_type": self.disk_type,
            "network_mbps": self.network_mbps,
        }
        if self.deployment is not None:
            result["deployment"] = self.deployment.to_dict()
        return result


@dataclass(frozen=True)
class SizingResult:
    """Complete result of calculate_infrastructure()"""
    site_distribution: Dict[str, int]
    vertical_specs: ResourceSpec
    subsystem_specs: Dict[str, SubsystemSpec]
    subsystem_distribution: Dict[str, Dict[str, int]]
    average_load_per_dc: float
    warnings: List[str]
    total_dcs: int
    total_dc_ram: int
    total_dc_cpu: int
    total_dc_disk: int
    total_subsystem_ram: int
    total_subsystem_cpu: int
    total_subsystem_disk: int
    total_subsystem_servers: Dict[str, int] = field(default_factory=dict)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "site_distribution": dict(self.site_distribution),
            "vertical_specs": self.vertical_specs.to_dict(),
            "subsystem_specs": {k: v.to_dict() for k, v in self.subsystem_specs.items()},
            "subsystem_distribution": {
                k: dict(v) for k, v in self.subsystem_distribution.items()
            },
            "average_load_per_dc": self.average_load_per_dc,
            "warnings": list(self.warnings),
            "total_dcs": self.total_dcs,
            "total_dc_ram": self.total_dc_ram,
            "total_dc_cpu": self.total_dc_cpu,
            "total_dc_disk": self.total_dc_disk,
            "total_subsystem_ram": self.total_subsystem_ram,
            "total_subsystem_cpu": self.total_subsystem_cpu,
            "total_subsystem_disk": self.total_subsystem_disk,
            "total_subsystem_servers": dict(self.total_subsystem_servers),
        }
