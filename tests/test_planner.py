"""
Unit Tests for infra_planner/sizing/planner.py

Tests for:
    - Automatic DC planning and the HA floor
    - Fixed DC count distribution
    - Subsystem server placement
"""

import random

import pytest

from infra_planner.sizing import (
    DCLoadModel,
    SizingConfig,
    SubsystemDistribution,
    plan_dcs_per_site,
    plan_subsystem_distribution,
)
from infra_planner.sizing.planner import effective_load_target, sites_by_users


# =============================================================================
# Load Target Tests
# =============================================================================

class TestLoadTarget:
    """Tests for the users-per-DC target."""

    def test_default_model(self):
        assert effective_load_target(SizingConfig(users_per_dc_target=500)) == 2000

    def test_high_density_model(self):
        config = SizingConfig(dc_load_model=DCLoadModel.HIGH_DENSITY)
        assert effective_load_target(config) == 2000

    def test_custom_model(self):
        config = SizingConfig(dc_load_model=DCLoadModel.CUSTOM, users_per_dc_target=500)
        assert effective_load_target(config) == 500

    def test_custom_model_with_invalid_target(self):
        """A non-positive target falls back to the default."""
        config = SizingConfig(dc_load_model=DCLoadModel.CUSTOM, users_per_dc_target=0)
        assert effective_load_target(config) == 2000


# =============================================================================
# Automatic Planning Tests
# =============================================================================

class TestAutomaticPlanning:
    """Tests for ceil(users / target) with the HA floor."""

    def test_single_site_small(self):
        """Even a tiny single site gets two DCs."""
        assert plan_dcs_per_site(SizingConfig(), {"Site 1": 1000}) == {"Site 1": 2}

    def test_single_site_without_users(self):
        """A lone site with no users gets one DC."""
        assert plan_dcs_per_site(SizingConfig(), {"Site 1": 0}) == {"Site 1": 1}

    def test_single_site_large(self):
        assert plan_dcs_per_site(SizingConfig(), {"Site 1": 30001}) == {"Site 1": 16}

    def test_multi_site(self):
        result = plan_dcs_per_site(SizingConfig(), {"HQ": 18000, "Branch": 12000})
        assert result == {"HQ": 9, "Branch": 6}

    def test_multi_site_floor_and_empty(self):
        """Populated sites get at least 2, empty sites none."""
        result = plan_dcs_per_site(SizingConfig(), {"HQ": 100, "Empty": 0, "Branch": 1})
        assert result == {"HQ": 2, "Empty": 0, "Branch": 2}

    def test_custom_target(self):
        config = SizingConfig(dc_load_model=DCLoadModel.CUSTOM, users_per_dc_target=500)
        assert plan_dcs_per_site(config, {"A": 2600, "B": 400}) == {"A": 6, "B": 2}

    def test_no_sites(self):
        assert plan_dcs_per_site(SizingConfig(), {}) == {}


# =============================================================================
# Fixed DC Count Tests
# =============================================================================

class TestFixedDcCount:
    """Tests for distributing custom_dc_count across sites."""

    def test_proportional_split(self):
        config = SizingConfig(total_users=1000, custom_dc_count=10)
        assert plan_dcs_per_site(config, {"A": 800, "B": 200}) == {"A": 7, "B": 3}

    def test_empty_site_gets_nothing(self):
        config = SizingConfig(total_users=1000, custom_dc_count=5)
        result = plan_dcs_per_site(config, {"A": 600, "B": 0, "C": 400})
        assert result == {"A": 2, "B": 0, "C": 3}

    def test_leftovers_go_to_largest_sites_first(self):
        """Counts below total_users leave DCs over; they cycle by user count."""
        config = SizingConfig(total_users=2000, custom_dc_count=6)
        assert plan_dcs_per_site(config, {"A": 400, "B": 400}) == {"A": 3, "B": 3}

    def test_leftovers_skip_empty_sites(self):
        """Counts below total_users never push leftovers onto empty sites."""
        config = SizingConfig(total_users=1000, custom_dc_count=10)
        assert plan_dcs_per_site(config, {"A": 100, "B": 0}) == {"A": 10, "B": 0}

    def test_leftovers_without_users(self):
        """With no users anywhere, leftovers go round all sites."""
        config = SizingConfig(total_users=1000, custom_dc_count=3)
        assert plan_dcs_per_site(config, {"A": 0, "B": 0}) == {"A": 2, "B": 1}

    def test_single_site_takes_everything(self):
        config = SizingConfig(total_users=1000, custom_dc_count=4)
        assert plan_dcs_per_site(config, {"Only": 1000}) == {"Only": 4}

    def test_fewer_dcs_than_sites(self):
        """Every populated site still receives its reserved DC."""
        config = SizingConfig(total_users=300, custom_dc_count=2)
        result = plan_dcs_per_site(config, {"A": 100, "B": 100, "C": 100})
        assert result == {"A": 1, "B": 1, "C": 1}

    def test_zero_count_means_automatic(self):
        config = SizingConfig(total_users=1000, custom_dc_count=0)
        assert plan_dcs_per_site(config, {"Site 1": 1000}) == {"Site 1": 2}

    def test_total_is_preserved(self):
        """Whenever there are enough DCs to reserve, the sum equals the count."""
        rng = random.Random(7)
        for _ in range(200):
            users = {f"S{i}": rng.choice([0, rng.randint(1, 50000)]) for i in range(rng.randint(1, 6))}
            populated = sum(1 for u in users.values() if u > 0)
            if populated == 0:
                continue
            dc_count = rng.randint(populated, 60)
            config = SizingConfig(total_users=sum(users.values()), custom_dc_count=dc_count)
            result = plan_dcs_per_site(config, users)
            assert sum(result.values()) == dc_count
            assert all(result[s] == 0 for s, u in users.items() if u == 0)
            assert all(result[s] >= 1 for s, u in users.items() if u > 0)

    def test_sites_by_users_is_stable(self):
        assert sites_by_users({"A": 5, "B": 9, "C": 5}) == ["B", "A", "C"]


# =============================================================================
# Subsystem Placement Tests
# =============================================================================

class TestSubsystemPlacement:
    """Tests for subsystem server distribution."""

    def test_automatic_one_per_populated_site(self):
        config = SizingConfig(subsystem_dhcp=True)
        plan = plan_subsystem_distribution(config, ["A", "B", "C"], {"A": 10, "B": 0, "C": 5})
        assert plan == {"dhcp": {"A": 1, "B": 0, "C": 1}}

    def test_automatic_without_users_uses_first_site(self):
        config = SizingConfig(subsystem_printing=True)
        plan = plan_subsystem_distribution(config, ["A", "B"], {"A": 0, "B": 0})
        assert plan == {"printing": {"A": 1, "B": 0}}

    def test_overrides_ignored_unless_enabled(self):
        config = SizingConfig(
            subsystem_dhcp=True,
            subsystem_distributions={"dhcp": SubsystemDistribution(5, {"A": "5"})},
        )
        plan = plan_subsystem_distribution(config, ["A", "B"], {"A": 10, "B": 10})
        assert plan["dhcp"] == {"A": 1, "B": 1}

    def test_custom_placement(self):
        config = SizingConfig(
            subsystem_monitoring=True,
            custom_subsystem_distribution=True,
            subsystem_distributions={
                "monitoring": SubsystemDistribution(3, {"A": "2", "B": "1"}),
            },
        )
        plan = plan_subsystem_distribution(config, ["A", "B"], {"A": 10, "B": 90})
        assert plan["monitoring"] == {"A": 2, "B": 1}

    def test_custom_discrepancy_goes_to_busiest_site(self):
        """Missing servers land on the site with the most users."""
        config = SizingConfig(
            subsystem_monitoring=True,
            custom_subsystem_distribution=True,
            subsystem_distributions={
                "monitoring": SubsystemDistribution(4, {"A": "1", "B": "1"}),
            },
        )
        plan = plan_subsystem_distribution(config, ["A", "B"], {"A": 10, "B": 90})
        assert plan["monitoring"] == {"A": 1, "B": 3}

    def test_custom_surplus_is_taken_back(self):
        config = SizingConfig(
            subsystem_monitoring=True,
            custom_subsystem_distribution=True,
            subsystem_distributions={
                "monitoring": SubsystemDistribution(1, {"A": "2", "B": "x"}),
            },
        )
        plan = plan_subsystem_distribution(config, ["A", "B"], {"A": 50, "B": 50})
        assert plan["monitoring"] == {"A": 1, "B": 0}

    def test_custom_falls_back_per_subsystem(self):
        """Subsystems without an override keep automatic placement."""
        config = SizingConfig(
            subsystem_monitoring=True,
            subsystem_dhcp=True,
            custom_subsystem_distribution=True,
            subsystem_distributions={"monitoring": SubsystemDistribution(2, {"A": "2"})},
        )
        plan = plan_subsystem_distribution(config, ["A", "B"], {"A": 1, "B": 1})
        assert plan == {"monitoring": {"A": 2, "B": 0}, "dhcp": {"A": 1, "B": 1}}

    @pytest.mark.parametrize("sites", [[], ["A"]])
    def test_disabled_subsystems_absent(self, sites):
        plan = plan_subsystem_distribution(SizingConfig(), sites, {s: 1 for s in sites})
        assert plan == {}
