"""Configuration management for monzo-client."""

import json
import os
from pathlib import Path
from typing import Any

from monzo_client.auth import API_URL
from monzo_client.models import AccessToken

# Default config filename
CONFIG_FILENAME = "config.json"
CONFIG_DIRNAME = "monzo-client"


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / CONFIG_DIRNAME


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/monzo-client/config.json
    """
    config_paths = [
        Path(CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path) as f:
        return json.load(f)  # type: ignore[no-any-return]


def _private_opener(path: str, flags: int) -> int:
    return os.open(path, flags, 0o600)


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    The file holds client secrets and tokens, so it is written readable by
    the owner only.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # New files are created 0600; existing files are narrowed before writing
    with open(config_path, "w", opener=_private_opener) as f:
        config_path.chmod(0o600)
        json.dump(config, f, indent=2)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def config_exists() -> bool:
    """Check if any config file exists."""
    return find_config_file() is not None


def get_client_credentials(
    config: dict[str, Any] | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
) -> tuple[str | None, str | None]:
    """Get OAuth client credentials.

    Args:
        config: Loaded JSON config
        client_id: Optional client ID to use instead of config
        client_secret: Optional client secret to use instead of config

    Returns:
        Tuple of (client_id, client_secret); either may be None
    """
    config = config or {}
    return (
        client_id or config.get("client_id"),
        client_secret or config.get("client_secret"),
    )


def get_api_url(config: dict[str, Any] | None = None, override: str | None = None) -> str:
    """Get the API base URL, defaulting to production."""
    if override:
        return override
    if config and config.get("api_url"):
        return config["api_url"]  # type: ignore[no-any-return]
    return API_URL


def get_access_token(config: dict[str, Any] | None = None) -> AccessToken | None:
    """Get the stored access token.

    Args:
        config: Loaded JSON config

    Returns:
        AccessToken, or None if no token has been saved
    """
    if not config:
        return None

    token_data = config.get("token")
    if not token_data or not token_data.get("access_token"):
        return None

    return AccessToken.from_dict(token_data)


def store_access_token(config: dict[str, Any], token: AccessToken) -> dict[str, Any]:
    """Return a copy of config with the token stored in it."""
    updated = dict(config)
    updated["token"] = token.to_dict()
    return updated


def create_default_config() -> dict[str, Any]:
    """Create a default empty configuration."""
    return {
        "client_id": None,
        "client_secret": None,
        "api_url": API_URL,
        "redirect_uri": None,
        "token": None,
    }
