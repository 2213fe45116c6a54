from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path
from typing import Any

from levy_share.dataset import BUNDLED_DATASET_PATH
from levy_share.eit import DEFAULT_EIT_RATE
from levy_share.utils.contracts import validate_payload

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LEVY_SHARE_CONFIG"
DEFAULT_DATASET_PATHS = ("data/fairfield.json", "fairfield.json", str(BUNDLED_DATASET_PATH))
DEFAULT_LOOKUP_URL = "https://tri-star-automotive.com/api/butler-tax.php"
DEFAULT_AUDITOR_URL = "https://auditor.bcohio.gov/"


@dataclass(frozen=True)
class AppConfig:
    dataset_paths: tuple[str, ...] = field(default=DEFAULT_DATASET_PATHS)
    lookup_url: str = DEFAULT_LOOKUP_URL
    lookup_timeout: float = 10.0
    eit_rate: Decimal = DEFAULT_EIT_RATE
    auditor_url: str = DEFAULT_AUDITOR_URL


def config_from_dict(payload: dict[str, Any], base_dir: Path | None = None) -> AppConfig:
    """
    Overlay a decoded config document on the defaults.

    Relative dataset paths resolve against `base_dir` (the config file's
    folder); URLs are kept as-is.
    """
    validate_payload(payload, "app_config", mode="STRICT")
    config = AppConfig()
    updates: dict[str, Any] = {}

    if "dataset_paths" in payload:
        paths = []
        for raw in payload["dataset_paths"]:
            if base_dir is not None and not raw.startswith(("http://", "https://")) and not Path(raw).is_absolute():
                paths.append(str(base_dir / raw))
            else:
                paths.append(raw)
        updates["dataset_paths"] = tuple(paths)
    if "lookup_url" in payload:
        updates["lookup_url"] = payload["lookup_url"]
    if "lookup_timeout" in payload:
        updates["lookup_timeout"] = float(payload["lookup_timeout"])
    if "eit_rate" in payload:
        updates["eit_rate"] = Decimal(str(payload["eit_rate"]))
    if "auditor_url" in payload:
        updates["auditor_url"] = payload["auditor_url"]

    return replace(config, **updates)


def load_config(path: Path | None = None) -> AppConfig:
    """
    Load the app configuration.

    Uses `path` if given, else the file named by LEVY_SHARE_CONFIG, else the
    built-in defaults.

    Raises:
        FileNotFoundError: If an explicitly named config file does not exist.
        ContractError: If the config violates the `app_config` schema.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            return AppConfig()
        path = Path(env_path)

    path = path.expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    logger.info(f"Loaded config from {path}")
    return config_from_dict(payload, base_dir=path.parent)
