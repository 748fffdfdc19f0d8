"""
Configuration loading and validation.

Config sections:
- venues: Static venue metadata used to build the registry
- fetch: HTTP settings for the optional fetch layer
- logging: Log level for the CLI
"""

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional
import json
import os

from ..errors import ConfigurationError

CONFIG_ENV_VAR = "WASGEIT_CONFIG"
LOG_LEVEL_ENV_VAR = "WASGEIT_LOG_LEVEL"

LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}

DEFAULT_VENUES = [
    {"short_name": "isc", "name": "ISC Club", "url": "https://www.isc-club.ch"},
    {"short_name": "kiff", "name": "KIFF", "url": "https://www.kiff.ch"},
    {"short_name": "kofmehl", "name": "Kulturfabrik Kofmehl", "url": "https://www.kofmehl.net"},
    {"short_name": "kairo", "name": "Café Kairo", "url": "https://www.cafe-kairo.ch/kultur"},
    {"short_name": "coq-d-or", "name": "Coq d'Or", "url": "https://www.coqdor.ch"},
    {"short_name": "dachstock", "name": "Dachstock", "url": "https://www.dachstock.ch"},
    {"short_name": "turnhalle", "name": "Turnhalle", "url": "https://www.turnhalle.ch"},
    {"short_name": "brasserie-lorraine", "name": "Brasserie Lorraine", "url": "https://www.brasserie-lorraine.ch/events/"},
    {"short_name": "mahogany-hall", "name": "Mahogany Hall", "url": "https://www.mahogany.ch"},
    {"short_name": "heitere-fahne", "name": "Heitere Fahne", "url": "https://www.dieheiterefahne.ch"},
    {"short_name": "ono", "name": "ONO Das Kulturlokal", "url": "https://www.onobern.ch"},
    {"short_name": "marta", "name": "Marta", "url": "https://www.cafemarta.ch"},
    {"short_name": "bierhuebeli", "name": "Bierhübeli", "url": "https://www.bierhuebeli.ch"},
    {"short_name": "dampfzentrale", "name": "Dampfzentrale", "url": "https://www.dampfzentrale.ch/programm/"},
]


def get_default_config() -> dict[str, Any]:
    """Return default config for the built-in venues."""
    return {
        "venues": deepcopy(DEFAULT_VENUES),
        "fetch": {
            "timeout": 30.0,
            "max_attempts": 3,
            "base_delay": 1.0,
            "user_agent": "Mozilla/5.0 (compatible; wasgeit/1.0)",
        },
        "logging": {
            "level": "info",
        },
    }


def _read_json(path: Path) -> dict[str, Any]:
    try:
        loaded = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError([f"Cannot read config file {path}: {e.strerror or e}"]) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError([f"Invalid JSON in {path}: {e}"]) from e

    if not isinstance(loaded, dict):
        raise ConfigurationError([f"Config file {path} must contain a JSON object"])
    return loaded


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    """
    Load config from a JSON file, falling back to defaults per section.

    Sections that are not objects in the file replace the default as-is, so
    validate_config() can report them.

    Args:
        path: Config file; defaults to $WASGEIT_CONFIG, then built-in defaults

    Returns:
        Config dict with every section present

    Raises:
        ConfigurationError: If the file is unreadable or not a JSON object
    """
    config = get_default_config()

    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])

    if path is not None:
        loaded = _read_json(path)

        if "venues" in loaded:
            config["venues"] = loaded["venues"]
        for section in ("fetch", "logging"):
            value = loaded.get(section, {})
            if isinstance(value, dict):
                config[section].update(value)
            else:
                config[section] = value

    logging_section = config["logging"]
    if isinstance(logging_section, dict):
        level = os.environ.get(LOG_LEVEL_ENV_VAR) or logging_section.get("level")
        if isinstance(level, str):
            logging_section["level"] = level.lower()

    return config


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate config and return list of errors.

    Returns:
        List of error messages (empty if valid)
    """
    errors: list[str] = []

    venues = config.get("venues")
    if not venues:
        errors.append("Missing required field: venues")
        venues = []
    elif not isinstance(venues, list):
        errors.append("venues must be a list of venue objects")
        venues = []

    seen: set[str] = set()
    for i, venue in enumerate(venues):
        if not isinstance(venue, dict):
            errors.append(f"venues[{i}]: expected an object, got {type(venue).__name__}")
            continue

        key = venue.get("short_name")
        if not key or not isinstance(key, str):
            errors.append(f"venues[{i}]: missing short_name")
            continue
        if key in seen:
            errors.append(f"Duplicate venue key: {key}")
        seen.add(key)

        if not venue.get("name") or not isinstance(venue.get("name"), str):
            errors.append(f"venues[{i}] ({key}): missing name")
        url = venue.get("url", "")
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            errors.append(f"venues[{i}] ({key}): invalid url '{url}'")

    fetch = config.get("fetch", {})
    if not isinstance(fetch, dict):
        errors.append("fetch must be an object")
        fetch = {}
    timeout = fetch.get("timeout", 30.0)
    if not _is_number(timeout) or timeout <= 0:
        errors.append(f"Invalid fetch timeout: {timeout} (must be > 0)")
    max_attempts = fetch.get("max_attempts", 3)
    if not isinstance(max_attempts, int) or isinstance(max_attempts, bool) or max_attempts < 1:
        errors.append(f"Invalid fetch max_attempts: {max_attempts} (must be >= 1)")
    base_delay = fetch.get("base_delay", 1.0)
    if not _is_number(base_delay) or base_delay < 0:
        errors.append(f"Invalid fetch base_delay: {base_delay} (must be >= 0)")
    if not isinstance(fetch.get("user_agent", ""), str):
        errors.append("Invalid fetch user_agent: must be a string")

    logging_section = config.get("logging", {})
    if not isinstance(logging_section, dict):
        errors.append("logging must be an object")
        logging_section = {}
    level = logging_section.get("level", "info")
    if not isinstance(level, str) or level not in LOG_LEVELS:
        errors.append(f"Unknown log level: {level}")

    return errors
