#!/usr/bin/env python3
"""
Topology Validation CLI

Validates an exported replication topology (sites, domain controllers and
replication links) against the design rules:

- Every DC has at least 2 replication links (when more than one DC exists)
- No DC has more than 4 replication links
- All sites hosting DCs are connected through inter-site links

Usage:
    # Validate a topology export
    python validate_topology.py --input topology-export.json

    # Fail (exit code 1) when errors are found, e.g. in CI
    python validate_topology.py --input topology-export.json --strict

    # Machine readable findings
    python validate_topology.py --input topology-export.json --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from infra_planner.config import Container, Settings
from infra_planner.topology import TopologyData, TopologyStore, ValidationIssue


# =============================================================================
# Terminal Colors
# =============================================================================

class Colors:
    HEADER = '\033[95m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    END = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    @classmethod
    def disable(cls):
        for attr in ['HEADER', 'CYAN', 'GREEN', 'YELLOW', 'RED', 'END', 'BOLD', 'DIM']:
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


def print_topology(store: TopologyStore) -> None:
    print_section("TOPOLOGY")
    for key, value in store.export_topology().summary().items():
        print_kv(key.replace("_", " ").capitalize(), value)

    for site in store.sites.values():
        dcs = store.dcs_in_site(site.id)
        names = ", ".join(
            f"{dc.name}{'*' if dc.is_key else ''} ({store.get_link_count_for_dc(dc.id)})"
            for dc in dcs
        )
        print(f"  {Colors.BOLD}{site.name}{Colors.END}: {names or '-'}")
    unassigned = store.unassigned_dcs()
    if unassigned:
        print(f"  {Colors.DIM}Unassigned{Colors.END}: {', '.join(dc.name for dc in unassigned)}")


def print_issues(issues: List[ValidationIssue]) -> None:
    print_section("VALIDATION")
    if not issues:
        print(f"  {Colors.GREEN}✓ Topology is valid{Colors.END}")
        return

    print(f"  {Colors.RED}{Colors.BOLD}Validation Issues Found ({len(issues)}){Colors.END}")
    for issue in issues:
        color = Colors.RED if issue.is_error else Colors.YELLOW
        print(f"  {color}•{Colors.END} {issue.message}")


# =============================================================================
# Main
# =============================================================================

def load_topology(path: Path) -> TopologyData:
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a topology object with sites, dcs and links")
    return TopologyData.from_dict(data)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate a domain controller replication topology",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--input", "-i", type=Path, required=True, help="Topology export (JSON)")
    parser.add_argument("--strict", action="store_true", help="Exit with code 1 when errors are found")
    parser.add_argument("--output", "-o", type=Path,
                        help="Write findings as JSON (relative paths go under the output directory)")
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
    logger = logging.getLogger("validate_topology")

    try:
        data = load_topology(args.input)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.debug("Topology load error", exc_info=True)
        print_error(f"Could not load topology: {e}")
        return 1

    container = Container.from_settings(settings)
    store = container.topology_store()
    store.import_topology(data)
    issues = store.validate_topology()

    report = {
        "valid": not issues,
        "summary": data.summary(),
        "issues": [issue.to_dict() for issue in issues],
    }
    output_path = settings.resolve_output(args.output) if args.output else None
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(report, f, indent=2)

    if args.json:
        print(json.dumps(report, indent=2))
    elif not args.quiet:
        print_header("Replication Topology Validation")
        print_kv("Input", args.input)
        print_topology(store)
        print_issues(issues)

    if args.strict and any(issue.is_error for issue in issues):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
