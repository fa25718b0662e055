import json
import os
import re
from typing import Any, Dict

CONFIG_PATH = "config.json"

# Default configuration values
DEFAULT_CONFIG = {
    # Spotify Web API (OAuth PKCE)
    "spotify_client_id": "",
    "spotify_redirect_uri": "http://127.0.0.1:5173/callback",

    # Where the verifier and access token survive between runs
    "auth_state_file": "data/auth_state.json",

    "top_tracks_time_range": "long_term",

    # True: open a browser and catch the callback on the redirect URI.
    # False: print the URL and paste the redirect back in.
    "open_browser": True,

    "log_file": "logs/app.log",
    "log_level": "INFO",
}

# Validation rules for config fields
CONFIG_SCHEMA = {
    # Empty until the user registers an app; checked again at sign-in.
    "spotify_client_id": {"type": str, "required": False, "pattern": r"^[0-9a-fA-F]{32}$"},
    "spotify_redirect_uri": {"type": str, "required": True},
    "auth_state_file": {"type": str, "required": True},
    "top_tracks_time_range": {
        "type": str,
        "required": False,
        "choices": ["short_term", "medium_term", "long_term"],
    },
    "open_browser": {"type": bool, "required": False},
    "log_file": {"type": str, "required": False},
    "log_level": {"type": str, "required": False, "choices": ["DEBUG", "INFO", "WARNING", "ERROR"]},
}


def load_config() -> Dict[str, Any]:
    """Load configuration from file, applying defaults for missing fields."""
    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file {CONFIG_PATH} not found.")

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        config = json.load(f)

    # Apply defaults for missing fields
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    return config


def save_config(config: Dict[str, Any]) -> bool:
    """Save configuration to file."""
    try:
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        raise IOError(f"Failed to save config: {e}") from e


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate configuration against schema.
    Returns (is_valid, list_of_errors).
    """
    errors = []

    for key, rules in CONFIG_SCHEMA.items():
        if rules.get("required", False) and key not in config:
            errors.append(f"Missing required field: {key}")
            continue

        if key not in config:
            continue

        value = config[key]

        expected_type = rules.get("type")
        if expected_type and not isinstance(value, expected_type):
            errors.append(f"Field '{key}' must be {expected_type.__name__}, got {type(value).__name__}")
            continue

        if "choices" in rules and value not in rules["choices"]:
            errors.append(f"Field '{key}' must be one of {rules['choices']}, got '{value}'")

        if "pattern" in rules and value and not re.match(rules["pattern"], value):
            errors.append(f"Field '{key}' must match {rules['pattern']}, got '{value}'")

    redirect_uri = config.get("spotify_redirect_uri")
    if isinstance(redirect_uri, str) and not redirect_uri.startswith(("http://", "https://")):
        errors.append(f"Field 'spotify_redirect_uri' must be an http(s) URL, got '{redirect_uri}'")

    return len(errors) == 0, errors


def update_config(key: str, value: Any) -> tuple[bool, str]:
    """
    Update a single config field with validation.
    Returns (success, message).
    """
    config = load_config()

    if key not in CONFIG_SCHEMA:
        return False, f"Unknown config key: {key}"

    test_config = config.copy()
    test_config[key] = value

    is_valid, errors = validate_config(test_config)
    if not is_valid:
        return False, f"Validation failed: {', '.join(errors)}"

    config[key] = value
    save_config(config)

    return True, f"Updated '{key}' to '{value}'"


def reset_to_defaults() -> tuple[bool, str]:
    """Reset configuration to default values."""
    try:
        save_config(DEFAULT_CONFIG.copy())
        return True, "Configuration reset to defaults"
    except IOError as e:
        return False, f"Failed to reset config: {e}"
