#!/usr/bin/env python3
"""
Export OpenAPI Specification

This script exports the FastAPI-generated OpenAPI specification for the
Chat Sessions API to JSON and YAML, then validates it.

Usage:
    python scripts/export_openapi.py [--validate-only] [--skip-validation]

Outputs:
    - docs/openapi.json  (JSON format)
    - docs/openapi.yaml  (YAML format)
"""

import json
import sys
from pathlib import Path

import yaml

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from chat_sessions.main import app  # noqa: E402

DOCS_DIR = project_root / "docs"


def export_openapi_spec() -> None:
    """Export the OpenAPI specification to JSON and YAML formats."""
    openapi_spec = app.openapi()

    DOCS_DIR.mkdir(exist_ok=True)

    json_path = DOCS_DIR / "openapi.json"
    with open(json_path, "w") as f:
        json.dump(openapi_spec, f, indent=2)
    print(f"Exported OpenAPI spec to {json_path}")

    yaml_path = DOCS_DIR / "openapi.yaml"
    with open(yaml_path, "w") as f:
        yaml.dump(openapi_spec, f, default_flow_style=False, sort_keys=False)
    print(f"Exported OpenAPI spec to {yaml_path}")

    schemas = openapi_spec.get("components", {}).get("schemas", {})
    print("\nOpenAPI Specification Summary:")
    print(f"   Title: {openapi_spec.get('info', {}).get('title', 'N/A')}")
    print(f"   Version: {openapi_spec.get('info', {}).get('version', 'N/A')}")
    print(f"   Paths: {len(openapi_spec.get('paths', {}))}")
    print(f"   Schemas: {len(schemas)}")


def validate_exported_spec() -> bool:
    """
    Validate the exported OpenAPI specification.

    Returns:
        True if validation passes, False otherwise
    """
    from openapi_spec_validator import validate
    from openapi_spec_validator.validation.exceptions import OpenAPIValidationError

    json_path = DOCS_DIR / "openapi.json"
    if not json_path.exists():
        print(f"OpenAPI spec not found at {json_path}")
        return False

    with open(json_path) as f:
        spec = json.load(f)

    try:
        validate(spec)
        print("OpenAPI spec validation passed")
        return True
    except OpenAPIValidationError as e:
        print(f"OpenAPI spec validation failed: {e}")
        return False


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Export and validate the Chat Sessions OpenAPI specification"
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate existing spec without exporting",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Skip validation after export",
    )

    args = parser.parse_args()

    if args.validate_only:
        sys.exit(0 if validate_exported_spec() else 1)

    export_openapi_spec()

    if not args.skip_validation:
        sys.exit(0 if validate_exported_spec() else 1)
