#!/usr/bin/env python3
"""
Print unified capability coverage for each supported platform
"""

import sys
import json

from smartthings_mcp.services.unified_device import Platform, parse_platform
from smartthings_mcp.services.capability_registry import create_capability_registry
from smartthings_mcp.helpers.capability_categorizer import CapabilityCategorizer


def build_report(platforms) -> dict:
    """Coverage summary and recommendations for the given platforms"""
    categorizer = CapabilityCategorizer(create_capability_registry())

    return {
        platform.value: {
            **categorizer.get_coverage_summary(platform),
            "recommendations": categorizer.get_recommendations(platform)
        }
        for platform in platforms
    }


def main():
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Show how much of the unified capability model each platform covers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # All platforms
  python coverage_report.py

  # One platform as JSON
  python coverage_report.py --platform lutron --json
        """
    )

    parser.add_argument(
        "--platform",
        help="Platform to report on (smartthings, tuya, lutron). Default: all",
        default=None
    )
    parser.add_argument(
        "--json",
        help="Output as JSON",
        action="store_true"
    )

    args = parser.parse_args()

    if args.platform:
        try:
            platforms = [parse_platform(args.platform)]
        except ValueError as e:
            print(f"\n❌ Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        platforms = list(Platform)

    report = build_report(platforms)

    if args.json:
        print(json.dumps(report, indent=2))
        return

    print()
    print("═" * 70)
    print("  Unified Capability Coverage")
    print("═" * 70)
    for name, summary in report.items():
        print()
        print(f"{name:<14} {summary['supported']}/{summary['total']} capabilities ({summary['coverage_percent']}%)")
        for category, counts in summary['categories'].items():
            print(f"  {category:<12} {counts['supported']}/{counts['total']}")
        if summary['missing']:
            print(f"  Missing:     {', '.join(summary['missing'])}")
        for recommendation in summary['recommendations']:
            print(f"  ⚠️  {recommendation}")
    print()


if __name__ == "__main__":
    main()
