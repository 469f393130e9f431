"""
Infrastructure Sizing

Maps user/group counts and a site layout to a recommended domain
controller deployment, per-DC hardware and auxiliary subsystem sizing.
"""

from .models import (
    DistributionType,
    DCLoadModel,
    SubsystemKind,
    SubsystemDistribution,
    SizingConfig,
    ResourceSpec,
    SubsystemSpec,
    SubsystemDeployment,
    SizingResult,
)
from .distribution import (
    to_absolute_users,
    default_site_distribution,
    default_subsystem_distribution,
)
from .planner import plan_dcs_per_site, plan_subsystem_distribution
from .engine import InfrastructureSizingEngine, calculate_infrastructure
from .loader import load_sizing_config, save_sizing_config

__all__ = [
    # Models
    "DistributionType",
    "DCLoadModel",
    "SubsystemKind",
    "SubsystemDistribution",
    "SizingConfig",
    "ResourceSpec",
    "SubsystemSpec",
    "SubsystemDeployment",
    "SizingResult",
    # Distribution
    "to_absolute_users",
    "default_site_distribution",
    "default_subsystem_distribution",
    # Planning
    "plan_dcs_per_site",
    "plan_subsystem_distribution",
    # Engine
    "InfrastructureSizingEngine",
    "calculate_infrastructure",
    # Files
    "load_sizing_config",
    "save_sizing_config",
]
