"""
Resource Formulas

Pure functions computing hardware requirements:

Per DC (vertical scaling):
    RAM  = max(8, (3.0 + objects/20000) x modifiers) GB
    Disk = (50.0 + objects/20000) x modifiers GB
    CPU  = max(1, ceil(load/1000)) cores
    Frequency, disk type and network follow load tiers.

Modifiers:
    Global catalog : RAM x1.15, Disk x1.15
    Sync service   : RAM x1.10, Disk x1.15

Per subsystem server:
    base x min(user_scaling, cap), capped per resource and subsystem class.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, NamedTuple

from .models import ResourceSpec, SizingConfig, SubsystemKind, SubsystemSpec


# =============================================================================
# Constants
# =============================================================================

MIN_DC_RAM_GB = 8
OBJECTS_PER_GB = 20000
BASE_RAM_GB = 3.0
BASE_DISK_GB = 50.0
USERS_PER_CORE = 1000

GC_MODIFIERS = {"ram": 1.15, "disk": 1.15}
SYNC_MODIFIERS = {"ram": 1.10, "disk": 1.15}

SCALING_USER_THRESHOLD = 10000
SCALING_USER_STEP = 20000


class LoadTier(NamedTuple):
    min_load: float
    cpu_freq_ghz: float
    disk_type: str
    network_mbps: int


# Highest threshold first; min_load is inclusive
LOAD_TIERS = (
    LoadTier(5000, 3.2, "SSD (RAID)", 10000),
    LoadTier(3000, 2.8, "SSD (RAID recommended)", 1000),
    LoadTier(1000, 2.4, "SSD", 1000),
    LoadTier(0, 2.0, "SSD", 100),
)


@dataclass(frozen=True)
class SubsystemProfile:
    """Per-server base requirements and scaling caps of a subsystem"""
    ram_gb: int
    cpu_cores: int
    disk_gb: int
    network_mbps: int
    ram_cap: float
    cpu_cap: float
    disk_cap: float
    disk_type: str = "SSD"


SUBSYSTEM_PROFILES: Dict[SubsystemKind, SubsystemProfile] = {
    SubsystemKind.MONITORING: SubsystemProfile(2, 2, 30, 1000, 3, 4, 5),
    SubsystemKind.JOURNALING: SubsystemProfile(2, 2, 100, 1000, 3, 4, 5),
    SubsystemKind.REPOSITORY: SubsystemProfile(2, 2, 100, 1000, 3, 4, 5),
    SubsystemKind.OS_INSTALLATION: SubsystemProfile(4, 2, 200, 1000, 3, 4, 5),
    SubsystemKind.PRINTING: SubsystemProfile(2, 1, 50, 1000, 2, 3, 4),
    SubsystemKind.FILE_SHARING: SubsystemProfile(4, 2, 500, 1000, 4, 4, 6),
    SubsystemKind.DHCP: SubsystemProfile(2, 1, 20, 1000, 2, 2, 3),
}


# =============================================================================
# DC formulas
# =============================================================================

def base_ram(total_objects: float) -> float:
    return BASE_RAM_GB + total_objects / OBJECTS_PER_GB


def ram_per_dc(total_objects: float) -> float:
    """RAM per DC in GB before feature modifiers"""
    return max(MIN_DC_RAM_GB, base_ram(total_objects))


def disk_per_dc(total_objects: float) -> float:
    """Disk per DC in GB before feature modifiers"""
    return BASE_DISK_GB + total_objects / OBJECTS_PER_GB


def cpu_cores_per_dc(average_load: float) -> int:
    return max(1, math.ceil(average_load / USERS_PER_CORE))


def load_tier(average_load: float) -> LoadTier:
    for tier in LOAD_TIERS:
        if average_load >= tier.min_load:
            return tier
    return LOAD_TIERS[-1]


def cpu_frequency(average_load: float) -> float:
    return load_tier(average_load).cpu_freq_ghz


def network_bandwidth(average_load: float) -> int:
    return load_tier(average_load).network_mbps


def apply_modifiers(ram: float, disk: float, enable_gc: bool, enable_sync: bool):
    """Apply global catalog then sync service multipliers to (ram, disk)."""
    if enable_gc:
        ram *= GC_MODIFIERS["ram"]
        disk *= GC_MODIFIERS["disk"]
    if enable_sync:
        ram *= SYNC_MODIFIERS["ram"]
        disk *= SYNC_MODIFIERS["disk"]
    return ram, disk


def vertical_specs(config: SizingConfig, total_objects: float, average_load: float) -> ResourceSpec:
    """Per-DC hardware specification."""
    ram, disk = apply_modifiers(
        base_ram(total_objects),
        disk_per_dc(total_objects),
        config.enable_gc,
        config.enable_sync,
    )
    # The RAM floor applies after the modifiers
    ram = max(MIN_DC_RAM_GB, ram)
    tier = load_tier(average_load)

    return ResourceSpec(
        ram_gb=math.ceil(ram),
        disk_gb=math.ceil(disk),
        cpu_cores=cpu_cores_per_dc(average_load),
        cpu_freq_ghz=tier.cpu_freq_ghz,
        disk_type=tier.disk_type,
        network_mbps=tier.network_mbps,
    )


# =============================================================================
# Subsystem formulas
# =============================================================================

def user_scaling(total_users: float) -> float:
    if total_users <= SCALING_USER_THRESHOLD:
        return 1.0
    return 1 + (total_users - SCALING_USER_THRESHOLD) / SCALING_USER_STEP


def subsystem_spec(kind: SubsystemKind, total_users: float) -> SubsystemSpec:
    """Per-server spec of one subsystem, scaled for the user count."""
    profile = SUBSYSTEM_PROFILES[kind]
    scale = user_scaling(total_users)
    return SubsystemSpec(
        ram_gb=math.ceil(profile.ram_gb * min(scale, profile.ram_cap)),
        cpu_cores=math.ceil(profile.cpu_cores * min(scale, profile.cpu_cap)),
        disk_gb=math.ceil(profile.disk_gb * min(scale, profile.disk_cap)),
        disk_type=profile.disk_type,
        network_mbps=profile.network_mbps,
    )


def subsystem_specs(config: SizingConfig) -> Dict[str, SubsystemSpec]:
    return {
        kind.value: subsystem_spec(kind, config.total_users)
        for kind in config.enabled_subsystems()
    }
