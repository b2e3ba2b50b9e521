#!/usr/bin/env python
"""
Import a tier table (CSV or Excel) into the stored shipping settings.

Usage:
    python scripts/import_tiers.py tiers.csv [--threshold 60] [--label "Ground"]
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from shipping_tiers.services.settings_service import SettingsService


def main():
    parser = argparse.ArgumentParser(description="Import shipping tiers from a CSV or Excel table")
    parser.add_argument("path", type=Path, help="Table with min, max, cost columns")
    parser.add_argument("--threshold", type=int, default=None, help="Free shipping threshold (0 disables)")
    parser.add_argument("--label", default=None, help="Shipping label shown to customers")
    args = parser.parse_args()

    print("Importing shipping tiers...")
    service = SettingsService()
    try:
        report = service.import_table(args.path, free_threshold=args.threshold, label=args.label)
    except (FileNotFoundError, ValueError) as e:
        print(f"\n❌ Import failed: {e}")
        sys.exit(1)

    if report["rows_imported"] == 0:
        print("\n⚠️ No valid tiers imported; every quantity now ships at zero cost")
    else:
        print(f"\n✅ {report['rows_imported']} tiers active")


if __name__ == "__main__":
    main()
