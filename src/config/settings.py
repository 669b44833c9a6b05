"""
Runtime settings for the site map service.

Usage:
    from src.config.settings import load_settings

    settings = load_settings()
    settings["data_path"]  # Path to sites.geojson

Settings come from config/sitemap.yaml (or the file named by SITEMAP_CONFIG),
falling back to defaults for anything missing. SITEMAP_DATA_PATH and
SITEMAP_LOG_LEVEL override the file. A .env file at the repo root is loaded
on import.

CLI check:
    python -m src.config.settings --check
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_repo_root = Path(__file__).resolve().parent.parent.parent  # src/config/settings.py -> repo root
_env_path = _repo_root / ".env"

if _env_path.exists():
    load_dotenv(_env_path)
else:
    load_dotenv()

DEFAULT_CONFIG_PATH = _repo_root / "config" / "sitemap.yaml"

DEFAULTS: Dict[str, Any] = {
    "data_path": "data/sites.geojson",
    "log_level": "INFO",
    "cors_origins": ["http://localhost:3000", "http://localhost:5173"],
}


class SettingsError(Exception):
    """Raised when the settings file exists but cannot be used."""
    pass


def _resolve(path_value: str) -> Path:
    path = Path(path_value)
    if not path.is_absolute():
        path = _repo_root / path
    return path


def load_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings, preferring environment overrides over the YAML file over defaults.

    Args:
        config_path: YAML file to read (default: SITEMAP_CONFIG or config/sitemap.yaml)

    Returns:
        Dict with data_path (Path), log_level (str), cors_origins (list)

    Raises:
        SettingsError: If the YAML file is unreadable or not a mapping
    """
    if config_path is None:
        env_config = os.environ.get("SITEMAP_CONFIG", "").strip()
        config_path = Path(env_config) if env_config else DEFAULT_CONFIG_PATH

    file_settings: Dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                file_settings = yaml.safe_load(f) or {}
        except (IOError, yaml.YAMLError) as e:
            raise SettingsError(f"Failed to load settings from {config_path}: {e}")
        if not isinstance(file_settings, dict):
            raise SettingsError(f"{config_path}: top level must be a mapping")
    else:
        logger.debug(f"No settings file at {config_path}, using defaults")

    settings = dict(DEFAULTS)
    settings.update({k: v for k, v in file_settings.items() if k in DEFAULTS})

    data_path = os.environ.get("SITEMAP_DATA_PATH", "").strip()
    if data_path:
        settings["data_path"] = data_path
    log_level = os.environ.get("SITEMAP_LOG_LEVEL", "").strip()
    if log_level:
        settings["log_level"] = log_level

    settings["data_path"] = _resolve(str(settings["data_path"]))
    settings["log_level"] = str(settings["log_level"]).upper()
    return settings


def _cli_check():
    """CLI entry point for --check flag."""
    try:
        settings = load_settings()
    except SettingsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for key, value in settings.items():
        print(f"{key}: {value}")

    if not settings["data_path"].exists():
        print(f"\nData file not found: {settings['data_path']}")
        sys.exit(1)
    print("\nSettings OK.")
    sys.exit(0)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Check site map settings"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Print resolved settings and check the data file exists"
    )

    args = parser.parse_args()

    if args.check:
        _cli_check()
    else:
        parser.print_help()
