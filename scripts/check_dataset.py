#!/usr/bin/env python3
"""
Check a site GeoJSON file loads cleanly and summarize what the filters will offer.

Usage:
    python scripts/check_dataset.py [path/to/sites.geojson]

Defaults to the data_path from config/sitemap.yaml.
"""

import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.config.settings import load_settings
from src.sitemap.models import count_buildings
from src.sitemap.options import build_option_index
from src.sitemap.sanitizer import LoadFailure, load_dataset
from src.sitemap.views import attribute_label


def check_dataset(path: Path) -> bool:
    """
    Load the dataset through the sanitizer and print a summary.

    Args:
        path: GeoJSON file to check

    Returns:
        True if the dataset loaded, False otherwise
    """
    print(f"Checking site dataset: {path}")
    print("")

    try:
        dataset = load_dataset(path)
    except LoadFailure as e:
        print(f"  ✗ {e}")
        return False

    print(f"✓ Sites: {len(dataset)}")
    print(f"✓ Buildings: {count_buildings(dataset)}")

    empty_sites = [site.site for site in dataset if not site.buildings]
    untagged = [
        b.doc_id for site in dataset for b in site.buildings
        if not (b.order or b.morphology or b.age or b.date)
    ]
    print("")

    print("Filter options:")
    for attr, values in build_option_index(dataset).items():
        print(f"  {attribute_label(attr)}: {len(values)}")
    print("")

    if empty_sites or untagged:
        print("Warnings:")
        for name in empty_sites:
            print(f"  ⚠ Site without buildings (never shown): {name}")
        for doc_id in untagged:
            print(f"  ⚠ Building without tags (hidden by any filter): {doc_id}")
        print("")

    print("All checks passed!")
    return True


if __name__ == "__main__":
    if len(sys.argv) > 1:
        target = Path(sys.argv[1])
    else:
        target = load_settings()["data_path"]

    success = check_dataset(target)
    sys.exit(0 if success else 1)
