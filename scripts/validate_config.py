#!/usr/bin/env python3
"""Configuration and routine file validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from momentum_app.config.loader import ConfigLoader
from momentum_app.config.validation import ConfigValidator
from momentum_app.data.task_normalizer import TaskNormalizer
from momentum_app.errors import TaskDefinitionError


def main():
    """Main validation function."""
    print("🔍 Validating Momentum configuration...")

    loader = ConfigLoader.create()
    all_valid = True

    try:
        config = loader.merge_config()
        errors = ConfigValidator.validate_config(config)

        if errors:
            print(f"❌ Found {len(errors)} validation errors in {loader.config_dir / 'runner.yaml'}:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print("✅ Runner configuration is valid")

    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        all_valid = False

    routines_dir = loader.config_dir / "routines"
    normalizer = TaskNormalizer()
    for routine_file in sorted(routines_dir.glob("*.yaml")):
        print(f"\n📋 Validating routine {routine_file.name}...")
        try:
            tasks = normalizer.load_routine_file(routine_file)
            total = sum(t.planned_duration for t in tasks)
            print(f"✅ {len(tasks)} tasks, {total:.0f}s planned")
        except TaskDefinitionError as e:
            print(f"❌ {e}")
            all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
