"""Interactive setup wizard for monzo-client."""

import getpass
from pathlib import Path
from typing import Any

from monzo_client.client import MonzoClient
from monzo_client.config import (
    create_default_config,
    get_api_url,
    get_config_path,
    load_config,
    save_json_config,
    store_access_token,
)
from monzo_client.errors import MonzoError


def mask_secret(secret: str) -> str:
    """Mask a secret for display, showing only its first and last characters."""
    if len(secret) > 12:
        return secret[:8] + "..." + secret[-4:]
    return "***"


def _prompt_existing(label: str, existing: str | None, secret: bool = False) -> str:
    """Prompt for a value, offering to keep an existing one."""
    if existing:
        shown = mask_secret(existing) if secret else existing
        print(f"\nExisting {label}: {shown}")
        use_existing = input("Use this value? [Y/n]: ").strip().lower()
        if use_existing in ("", "y", "yes"):
            return existing

    return input(f"{label}: ").strip()


def run_setup(
    config_path: Path | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
) -> dict[str, Any]:
    """Run the setup wizard.

    The flow:
    1. Collect the OAuth client ID and secret
    2. Log in with the user's Monzo email and password
    3. Save credentials and the issued token to the config file

    Args:
        config_path: Where to save the config (defaults to XDG location)
        client_id: OAuth client ID (prompts if not provided)
        client_secret: OAuth client secret (prompts if not provided)

    Returns:
        The configuration dictionary
    """
    print("\n" + "=" * 50)
    print("  MONZO-CLIENT SETUP")
    print("=" * 50)

    # Load existing config or create new
    config = None
    if config_path is None or config_path.exists():
        config = load_config(config_path)
    if config is None:
        config = create_default_config()

    # Step 1: Client credentials
    if not client_id:
        print("\nCreate an OAuth client at https://developers.monzo.com/")
        client_id = _prompt_existing("Client ID", config.get("client_id"))
    if not client_secret:
        client_secret = _prompt_existing("Client secret", config.get("client_secret"), secret=True)

    if not client_id or not client_secret:
        print("\nClient ID and secret are required. Cannot complete setup.")
        return config

    config["client_id"] = client_id
    config["client_secret"] = client_secret

    # Step 2: Log in
    username = input("\nMonzo email address: ").strip()
    password = getpass.getpass("Monzo password: ")

    print("\nRequesting access token...")
    with MonzoClient(
        client_id=client_id,
        client_secret=client_secret,
        base_url=get_api_url(config),
    ) as client:
        try:
            token = client.authenticate(username, password)
        except MonzoError as e:
            print(f"Error logging in: {e}")
            print("Please check your credentials and try again.")
            return config

    config = store_access_token(config, token)

    # Step 3: Save config
    saved_path = save_json_config(config, config_path or get_config_path())

    print("\n" + "=" * 50)
    print("SETUP COMPLETE")
    print("=" * 50)
    print(f"\nConfiguration saved to: {saved_path}")
    print(f"Logged in as user {token.user_id}")

    print("\nYou can now run:")
    print("  monzo-client --accounts")
    print("  monzo-client --transactions ACCOUNT_ID --limit 20")

    return config


def show_current_config(config: dict[str, Any]) -> None:
    """Display the current configuration."""
    print("\n" + "=" * 50)
    print("CURRENT CONFIGURATION")
    print("=" * 50)

    print(f"\nAPI URL: {get_api_url(config)}")

    client_id = config.get("client_id")
    client_secret = config.get("client_secret")
    if client_id:
        print(f"Client ID: {client_id}")
        print(f"Client secret: {mask_secret(client_secret) if client_secret else '(not set)'}")
    else:
        print("Client: Not configured")

    if config.get("redirect_uri"):
        print(f"Redirect URI: {config['redirect_uri']}")

    token = config.get("token")
    if token and token.get("access_token"):
        print(f"\nAccess token: {mask_secret(token['access_token'])}")
        print(f"User: {token.get('user_id') or '(unknown)'}")
        print(f"Expires at: {token.get('expires_at') or '(unknown)'}")
        print(f"Refresh token: {'yes' if token.get('refresh_token') else 'no'}")
    else:
        print("\nNot logged in")
