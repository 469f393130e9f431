#!/usr/bin/env python3
"""
Infrastructure Sizing CLI

Computes a recommended domain controller deployment for a directory:
- DCs per site (automatic load target or fixed total)
- Per-DC hardware (RAM, disk, CPU, network)
- Auxiliary subsystem servers and their hardware
- Totals and advisory warnings

Usage:
    # Size from a configuration file (YAML or JSON)
    python size_infrastructure.py --config sizing.yaml

    # Quick sizing from the command line
    python size_infrastructure.py --users 12000 --groups 900 --sites 3

    # Explicit site split and a fixed number of DCs
    python size_infrastructure.py --users 1000 --site "HQ=80" --site "Branch=20" --dc-count 10

    # Enable subsystems and write the result as JSON
    python size_infrastructure.py --config sizing.yaml --subsystem monitoring dhcp --output result.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from infra_planner.config import Container, Settings
from infra_planner.sizing import (
    DCLoadModel,
    SizingConfig,
    SizingResult,
    SubsystemKind,
    default_site_distribution,
)
from infra_planner.sizing.loader import read_document


# =============================================================================
# Terminal Colors
# =============================================================================

class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    END = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    @classmethod
    def disable(cls):
        for attr in ['HEADER', 'BLUE', 'CYAN', 'GREEN', 'YELLOW', 'RED', 'END', 'BOLD', 'DIM']:
            setattr(cls, attr, '')


def use_colors(settings: Settings) -> bool:
    return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty() and not settings.no_color


# =============================================================================
# Output Helpers
# =============================================================================

def print_header(text: str) -> None:
    print(f"\n{Colors.HEADER}{Colors.BOLD}{'='*60}{Colors.END}")
    print(f"{Colors.HEADER}{Colors.BOLD}{text:^60}{Colors.END}")
    print(f"{Colors.HEADER}{Colors.BOLD}{'='*60}{Colors.END}")


def print_section(title: str) -> None:
    print(f"\n{Colors.CYAN}{Colors.BOLD}{title}{Colors.END}")
    print(f"{Colors.DIM}{'-'*50}{Colors.END}")


def print_kv(key: str, value, indent: int = 2) -> None:
    print(f"{' '*indent}{Colors.DIM}{key}:{Colors.END} {value}")


def print_error(text: str) -> None:
    print(f"{Colors.RED}✗{Colors.END} {text}", file=sys.stderr)


def print_warning(text: str) -> None:
    print(f"{Colors.YELLOW}⚠{Colors.END} {text}")


# =============================================================================
# Display Functions
# =============================================================================

def print_result(result: SizingResult) -> None:
    """Print the sizing report"""
    print_section("SUMMARY")
    print_kv("Total DCs", result.total_dcs)
    print_kv("Average Load per DC", f"{round(result.average_load_per_dc)} users")
    print_kv("Total DC RAM", f"{result.total_dc_ram} GB")
    print_kv("Total DC CPU Cores", result.total_dc_cpu)
    print_kv("Total DC Storage", f"{result.total_dc_disk} GB")

    print_section("SITE DISTRIBUTION")
    width = max((len(site) for site in result.site_distribution), default=4)
    for site, count in result.site_distribution.items():
        bar = "█" * min(count, 40)
        print(f"  {site:<{width}}  {Colors.BLUE}{bar}{Colors.END} {count} DCs")

    print_section("DOMAIN CONTROLLER SPECIFICATIONS")
    specs = result.vertical_specs
    print_kv("RAM", f"{specs.ram_gb} GB")
    print_kv("CPU Cores", specs.cpu_cores)
    print_kv("CPU Frequency", f"{specs.cpu_freq_ghz} GHz")
    print_kv("Storage", f"{specs.disk_gb} GB")
    print_kv("Storage Type", specs.disk_type)
    print_kv("Network", f"{specs.network_mbps} Mbps")

    if result.subsystem_specs:
        print_section("SUBSYSTEM SPECIFICATIONS")
        print(f"  {'Subsystem':<16} {'RAM':>7} {'CPU':>4} {'Storage':>9} {'Servers':>8}  Placement")
        for key, spec in result.subsystem_specs.items():
            label = SubsystemKind(key).label
            servers = result.total_subsystem_servers.get(key, 0)
            placement = ", ".join(
                f"{site}={n}" for site, n in result.subsystem_distribution.get(key, {}).items() if n
            )
            print(
                f"  {label:<16} {spec.ram_gb:>4} GB {spec.cpu_cores:>4} {spec.disk_gb:>6} GB "
                f"{servers:>8}  {placement or '-'}"
            )
        print()
        print_kv("Total Subsystem RAM", f"{result.total_subsystem_ram} GB")
        print_kv("Total Subsystem CPU Cores", result.total_subsystem_cpu)
        print_kv("Total Subsystem Storage", f"{result.total_subsystem_disk} GB")

    if result.warnings:
        print_section("WARNINGS")
        for warning in result.warnings:
            print_warning(warning)


# =============================================================================
# Configuration
# =============================================================================

def parse_site_args(values: List[str]) -> Dict[str, str]:
    """Parse repeated NAME=VALUE arguments into an ordered mapping."""
    sites: Dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid --site value '{item}', expected NAME=VALUE")
        sites[name.strip()] = value.strip()
    return sites


def build_config(args: argparse.Namespace) -> SizingConfig:
    """Merge the config file (if any) with command line overrides."""
    data: Dict[str, Any] = read_document(args.config) if args.config else {}

    if args.users is not None:
        data["total_users"] = args.users
    if args.groups is not None:
        data["total_groups"] = args.groups
    if args.site:
        data["site_distributions"] = parse_site_args(args.site)
        data["num_sites"] = len(data["site_distributions"])
    elif args.sites is not None:
        data["num_sites"] = args.sites
        data["site_distributions"] = default_site_distribution(args.sites)
        data["distribution_type"] = "percentages"
    if args.absolute:
        data["distribution_type"] = "absolute"
    if args.load_model:
        data["dc_load_model"] = args.load_model
    if args.target is not None:
        data["users_per_dc_target"] = args.target
        if not args.load_model:
            data["dc_load_model"] = DCLoadModel.CUSTOM.value
    if args.dc_count is not None:
        data["custom_dc_count"] = args.dc_count
    if args.no_gc:
        data["enable_gc"] = False
    if args.no_sync:
        data["enable_sync"] = False
    for key in args.subsystem or []:
        data[SubsystemKind(key).flag_name] = True

    return SizingConfig.from_dict(data)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Size a domain controller deployment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python size_infrastructure.py --config sizing.yaml
    python size_infrastructure.py --users 12000 --groups 900 --sites 3
    python size_infrastructure.py --users 1000 --site HQ=800 --site Branch=200 --absolute
        """,
    )

    parser.add_argument("--config", "-c", type=Path, help="Sizing configuration (YAML or JSON)")

    # Directory
    parser.add_argument("--users", type=int, help="Total user accounts")
    parser.add_argument("--groups", type=int, help="Total groups")

    # Sites
    parser.add_argument("--sites", type=int, help="Number of sites (even split)")
    parser.add_argument("--site", action="append", metavar="NAME=VALUE",
                        help="Site and its share (repeatable)")
    parser.add_argument("--absolute", action="store_true", help="Site values are user counts")

    # DC planning
    parser.add_argument("--load-model", choices=[m.value for m in DCLoadModel],
                        help="DC load model")
    parser.add_argument("--target", type=int, help="Users per DC for the custom load model")
    parser.add_argument("--dc-count", type=int, help="Fixed total number of DCs")
    parser.add_argument("--no-gc", action="store_true", help="Disable global catalog")
    parser.add_argument("--no-sync", action="store_true", help="Disable sync service")
    parser.add_argument("--subsystem", nargs="+", choices=[k.value for k in SubsystemKind],
                        help="Subsystems to enable")

    # Output options
    parser.add_argument("--output", "-o", type=Path,
                        help="Write the result as JSON (relative paths go under the output directory)")
    parser.add_argument("--json", action="store_true", help="Output as JSON to stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    parser.add_argument("--no-color", action="store_true", help="Disable colors")

    return parser.parse_args()


def main() -> int:
    args = parse_args()
    settings = Settings.from_env()

    if args.no_color or not use_colors(settings):
        Colors.disable()

    log_level = logging.DEBUG if args.verbose else settings.logging_level
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    logger = logging.getLogger("size_infrastructure")

    try:
        config = build_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.debug("Configuration error", exc_info=True)
        print_error(f"Invalid configuration: {e}")
        return 1

    container = Container.from_settings(settings)
    result = container.sizing_engine().calculate(config)

    output_path = settings.resolve_output(args.output) if args.output else None
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump({"config": config.to_dict(), "result": result.to_dict()}, f, indent=2)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not args.quiet:
        print_header("Infrastructure Sizing Report")
        print_kv("Users", config.total_users)
        print_kv("Groups", config.total_groups)
        print_kv("Sites", len(config.site_distributions))
        print_result(result)
        if output_path:
            print(f"\n{Colors.GREEN}✓{Colors.END} Result written to {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
