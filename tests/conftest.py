"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for the infrastructure planner tests.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "topology"      # Run only topology tests
    pytest tests/ --quick            # Skip slow tests
"""

import random
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from infra_planner.sizing import SizingConfig
from infra_planner.topology import TopologyStore


# =============================================================================
# Custom Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--quick",
        action="store_true",
        default=False,
        help="Skip slow tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests if --quick is specified"""
    if config.getoption("--quick"):
        skip_slow = pytest.mark.skip(reason="Skipped with --quick")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# =============================================================================
# Sizing Fixtures
# =============================================================================

@pytest.fixture
def basic_config_data() -> Dict[str, Any]:
    """Single-site form defaults with both feature flags on"""
    return {
        "total_users": 1000,
        "total_groups": 100,
        "num_sites": 1,
        "distribution_type": "percentages",
        "site_distributions": {"Site 1": "100"},
        "dc_load_model": "default",
        "users_per_dc_target": 1500,
        "enable_gc": True,
        "enable_sync": True,
    }


@pytest.fixture
def basic_config(basic_config_data) -> SizingConfig:
    return SizingConfig.from_dict(basic_config_data)


@pytest.fixture
def two_site_config() -> SizingConfig:
    """30000 users split 60/40 with monitoring and DHCP enabled"""
    return SizingConfig(
        total_users=30000,
        total_groups=2000,
        num_sites=2,
        site_distributions={"HQ": "60", "Branch": "40"},
        subsystem_monitoring=True,
        subsystem_dhcp=True,
    )


# =============================================================================
# Topology Fixtures
# =============================================================================

@pytest.fixture
def store() -> TopologyStore:
    """Empty store with a seeded generator"""
    return TopologyStore(rng=random.Random(42))


@pytest.fixture
def two_site_store(store):
    """
    Two sites with three DCs each, linked in a triangle inside each site
    and no inter-site link.
    """
    hq = store.add_site("HQ")
    branch = store.add_site("Branch")
    dcs = {}
    for site in (hq, branch):
        members = [store.add_dc(f"{site.name}-DC{i}", site.id) for i in range(1, 4)]
        store.add_link(members[0].id, members[1].id)
        store.add_link(members[1].id, members[2].id)
        store.add_link(members[2].id, members[0].id)
        dcs[site.name] = members
    return store, hq, branch, dcs


@pytest.fixture
def topology_export() -> Dict[str, Any]:
    """Topology export document as written by the designer"""
    return {
        "sites": [
            {"id": "site-1", "name": "HQ", "width": 300, "height": 200,
             "backgroundColor": "hsla(120, 70%, 90%, 0.3)"},
            {"id": "site-2", "name": "Branch"},
        ],
        "dcs": [
            {"id": "dc-1", "name": "DC1", "siteId": "site-1", "isKey": True, "x": 10, "y": 20},
            {"id": "dc-2", "name": "DC2", "siteId": "site-1", "isKey": False},
            {"id": "dc-3", "name": "DC3", "siteId": "site-2", "isKey": False},
        ],
        "links": [
            {"id": "link-dc-1-dc-2", "sourceDC": "dc-1", "targetDC": "dc-2", "isInterSite": False},
            {"id": "link-dc-2-dc-3", "sourceDC": "dc-2", "targetDC": "dc-3", "isInterSite": True},
            {"id": "link-dc-3-dc-1", "sourceDC": "dc-3", "targetDC": "dc-1", "isInterSite": True},
        ],
    }
