"""
Data Contracts

JSON Schema checks for the documents levy-share reads and writes: the
spending dataset (`spending_dataset`), the optional config file
(`app_config`), and the summary payload emitted by the CLI
(`allocation_summary`). Inputs are checked STRICT; output is checked in
REVIEW mode so a contract drift is logged without blocking the report.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent.parent / "schemas"


class ContractError(Exception):
    """Raised when a payload violates its data contract."""

    pass


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a JSON schema from the package."""
    schema_path = SCHEMA_DIR / f"{schema_name}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    with open(schema_path, "r", encoding="utf-8") as f:
        return dict(json.load(f))


def validate_payload(data: Any, schema_name: str, mode: str = "STRICT") -> None:
    """
    Validate data against a JSON schema.

    Args:
        data: The decoded JSON document to validate.
        schema_name: Name of the schema file (without .json extension).
        mode: 'STRICT' (raises error) or 'REVIEW' (logs warning).

    Raises:
        ContractError: If validation fails and mode is STRICT.
    """
    try:
        schema = load_schema(schema_name)
        jsonschema.validate(instance=data, schema=schema)
    except (ValidationError, FileNotFoundError) as e:
        msg = f"Data Contract Violation ({schema_name}): {e}"
        if mode == "STRICT":
            raise ContractError(msg) from e
        logger.warning(msg)
