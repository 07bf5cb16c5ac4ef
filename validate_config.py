#!/usr/bin/env python3
"""Check lease config YAML files before the tracker loads them."""
import sys
from pathlib import Path

import yaml

from lease.loader import load_schema, schema_errors


def validate_config_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single lease config file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]
    return [f"Schema validation error: {error}" for error in schema_errors(data, schema)]


def main(argv=None):
    """Validate each lease config file named on the command line."""
    paths = [Path(p) for p in (sys.argv[1:] if argv is None else argv)]
    if not paths:
        print("Usage: validate_config.py CONFIG [CONFIG ...]")
        return 1

    schema = load_schema()
    failed = 0
    for filepath in paths:
        errors = validate_config_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            failed += 1
        else:
            print(f"OK: {filepath.name}")

    if failed:
        print(f"{failed} of {len(paths)} config files invalid")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
