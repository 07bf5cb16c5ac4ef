"""YAML loading and saving utilities for lease configuration."""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from jsonschema import Draft7Validator

from .lease_config import LeaseConfig, LeaseConfigError

logger = logging.getLogger(__name__)

# Used by the host when no config file exists yet
DEFAULT_CONFIG: Dict[str, Any] = {
    "apiToken": "",
    "vin": "",
    "startDate": "2025-07-01",
    "leaseMonths": 24,
    "totalMiles": 30000,
    "startOdometer": 0,
}

# snake_case attribute -> camelCase YAML key
_FIELDS = {
    "api_token": "apiToken",
    "vin": "vin",
    "start_date": "startDate",
    "lease_months": "leaseMonths",
    "total_miles": "totalMiles",
    "start_odometer": "startOdometer",
}


SCHEMA_PATH = Path(__file__).parent / "schema.yaml"


def load_schema() -> dict:
    """Load the lease config JSON schema from schema.yaml."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def schema_errors(data: Any, schema: Optional[dict] = None) -> List[str]:
    """
    Check raw config data against the schema. Returns list of errors.

    A bare YAML date for startDate is checked as its ISO string, since the
    loader accepts both forms.
    """
    if isinstance(data, dict) and isinstance(data.get("startDate"), date):
        data = dict(data, startDate=data["startDate"].isoformat())
    validator = Draft7Validator(schema if schema is not None else load_schema())
    errors = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        if error.path:
            errors.append(f"{'.'.join(str(p) for p in error.path)}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def config_from_dict(dct: Dict[str, Any]) -> LeaseConfig:
    """Build a LeaseConfig from the camelCase YAML mapping."""
    missing = [key for key in ("startDate", "leaseMonths", "totalMiles") if dct.get(key) is None]
    if missing:
        raise LeaseConfigError(f"Missing lease settings: {', '.join(missing)}")
    return LeaseConfig(
        start_date=dct["startDate"],
        lease_months=dct["leaseMonths"],
        total_miles=dct["totalMiles"],
        start_odometer=dct.get("startOdometer") or 0,
        api_token=dct.get("apiToken") or "",
        vin=dct.get("vin") or "",
    )


def config_to_dict(config: LeaseConfig) -> Dict[str, Any]:
    """Serialize a LeaseConfig to the YAML dict format (camelCase keys)."""
    return {
        "apiToken": config.api_token,
        "vin": config.vin,
        "startDate": config.start_date.isoformat(),
        "leaseMonths": config.lease_months,
        "totalMiles": config.total_miles,
        "startOdometer": config.start_odometer,
    }


def load_config(filename: Union[str, Path]) -> LeaseConfig:
    """Load a lease config from a YAML file, checking it against the schema first."""
    with open(filename, "rb") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    if not isinstance(data, dict):
        raise LeaseConfigError(f"{filename} does not contain a lease config mapping")
    errors = schema_errors(data)
    if errors:
        raise LeaseConfigError(f"Invalid lease config {filename}: {'; '.join(errors)}")
    return config_from_dict(data)


def load_config_or_default(filename: Union[str, Path]) -> LeaseConfig:
    """Load a lease config, falling back to DEFAULT_CONFIG if the file is absent."""
    if not Path(filename).exists():
        logger.info("No config at %s, using defaults", filename)
        return config_from_dict(DEFAULT_CONFIG)
    return load_config(filename)


def save_config(filename: Union[str, Path], config: LeaseConfig) -> None:
    """Write a lease config to a YAML file, replacing its contents."""
    with open(filename, "w") as fp:
        yaml.dump(
            config_to_dict(config),
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )
    logger.info("Saved lease config to %s", filename)


def merge_config(config: LeaseConfig, **changes: Any) -> LeaseConfig:
    """
    Return config with the provided fields replaced.

    Only fields that are provided (non-None) change, and the result is
    validated like any other LeaseConfig.
    """
    unknown = set(changes) - set(_FIELDS)
    if unknown:
        raise TypeError(f"Unknown config fields: {', '.join(sorted(unknown))}")

    data = config_to_dict(config)
    for attr, value in changes.items():
        if value is not None:
            data[_FIELDS[attr]] = value
    return config_from_dict(data)


def update_config(filename: Union[str, Path], **changes: Any) -> LeaseConfig:
    """
    Update selected fields of a lease config file.

    A missing file starts from DEFAULT_CONFIG. The merged config is validated
    before anything is written.
    """
    updated = merge_config(load_config_or_default(filename), **changes)
    save_config(filename, updated)
    return updated
