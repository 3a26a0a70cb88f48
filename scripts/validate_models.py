#!/usr/bin/env python
"""
Model validator - checks every volume model in a store file offline.

Usage:
    python scripts/validate_models.py [path/to/volume_models.json]

Exits non-zero when any model has configuration errors.
"""
import json
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from volume_pricing.config.settings import get_settings
from volume_pricing.engine.formatter import format_summary
from volume_pricing.engine.models import PricingModel
from volume_pricing.engine.validator import validate_model


def validate_store(store_path: Path, verbose: bool = True) -> tuple[int, int]:
    """
    Validate all models in a store file.

    Returns (models_checked, models_with_errors).
    """
    with open(store_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    checked = 0
    failed = 0
    for shop, shop_data in data.get('shops', {}).items():
        for model_id, record in shop_data.get('models', {}).items():
            checked += 1
            try:
                model = PricingModel.from_dict(record)
            except ValueError as e:
                failed += 1
                print(f"  ❌ {shop}/{model_id}: unreadable ({e})")
                continue

            errors = validate_model(model)
            if errors:
                failed += 1
                print(f"  ❌ {shop}/{model_id} ({model.name})")
                for err in errors:
                    print(f"      {err.path}: {err.message}")
            elif verbose:
                state = "active" if model.active else "inactive"
                print(f"  ✅ {shop}/{model_id} [{state}] {format_summary(model.tiers)}")

    return checked, failed


def main():
    """CLI entry point."""
    store_path = Path(sys.argv[1]) if len(sys.argv) > 1 else get_settings().models_store

    if not store_path.exists():
        print(f"ERROR: Model store not found at {store_path}")
        sys.exit(1)

    print(f"Validating volume models in {store_path}...")
    checked, failed = validate_store(store_path)

    print()
    if failed:
        print(f"❌ {failed} of {checked} models have errors")
        sys.exit(1)
    print(f"✅ All {checked} models valid")


if __name__ == "__main__":
    main()
