#!/usr/bin/env python3
"""Command-line interface for monzo-client."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import requests

from monzo_client.auth import AuthorizationClient
from monzo_client.client import MonzoClient
from monzo_client.config import (
    get_access_token,
    get_api_url,
    get_client_credentials,
    get_config_path,
    load_config,
    save_json_config,
    store_access_token,
)
from monzo_client.errors import MonzoError
from monzo_client.models import AccessToken, Transaction
from monzo_client.pagination import PaginationOptions
from monzo_client.utils import parse_timestamp


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_amount(amount: int, currency: str) -> str:
    """Format an amount in minor units, e.g. -1050 GBP -> -10.50 GBP."""
    sign = "-" if amount < 0 else ""
    major, minor = divmod(abs(amount), 100)
    return f"{sign}{major}.{minor:02d} {currency}"


def print_transaction(tx: Transaction) -> None:
    """Print one transaction as a table row."""
    merchant = ""
    if tx.merchant:
        merchant = tx.merchant.name or tx.merchant.id
    status = f"DECLINED ({tx.decline_reason})" if tx.is_declined else ""
    print(
        f"  {tx.created:%Y-%m-%d %H:%M}  {format_amount(tx.amount, tx.currency):>14}  "
        f"{tx.description[:40]:<40}  {merchant[:24]:<24}  {tx.category or '':<12} {status}"
        f"  [{tx.id}]"
    )


def _save_token(config: dict[str, Any], token: AccessToken, config_path: Path | None) -> Path:
    """Store the token in config and write it back to disk."""
    return save_json_config(store_access_token(config, token), config_path or get_config_path())


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Command-line client for the Monzo banking API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  monzo-client --setup
  monzo-client --accounts
  monzo-client --balance acc_00009237aqC8c5umZmrRdh
  monzo-client --transactions acc_00009237aqC8c5umZmrRdh --limit 20 --expand merchant
  monzo-client --authorize-url --state abc --redirect-uri https://example.com/callback
  monzo-client --refresh
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Setup
    parser.add_argument(
        "--setup",
        action="store_true",
        help="Run interactive setup wizard to configure credentials and log in",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration",
    )
    parser.add_argument("--client-id", help="OAuth client ID (or configure in config.json)")
    parser.add_argument("--client-secret", help="OAuth client secret (or configure in config.json)")
    parser.add_argument("--api-url", help="Monzo API URL (default: production)")

    # Authorization
    parser.add_argument(
        "--authorize-url",
        action="store_true",
        help="Print the URL to send a user to for authorizing this client",
    )
    parser.add_argument("--state", help="State value for --authorize-url")
    parser.add_argument("--redirect-uri", help="Redirect URI for --authorize-url/--exchange-code")
    parser.add_argument(
        "--exchange-code",
        metavar="CODE",
        help="Exchange an authorization code for an access token",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Refresh the stored access token",
    )

    # Resources
    parser.add_argument("--accounts", action="store_true", help="List accounts")
    parser.add_argument("--balance", metavar="ACCOUNT_ID", help="Show an account's balance")
    parser.add_argument(
        "--transactions",
        metavar="ACCOUNT_ID",
        help="List an account's transactions",
    )
    parser.add_argument("--transaction", metavar="TRANSACTION_ID", help="Show one transaction")
    parser.add_argument("--webhooks", metavar="ACCOUNT_ID", help="List an account's webhooks")
    parser.add_argument("--limit", type=int, help="Maximum number of transactions")
    parser.add_argument("--since", help="Transactions since a timestamp or transaction id")
    parser.add_argument("--before", help="Transactions before a timestamp")
    parser.add_argument(
        "--expand",
        choices=["merchant"],
        help="Expand related objects inline",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    # Handle setup first (before loading config)
    if args.setup:
        from monzo_client.setup import run_setup

        run_setup(
            config_path=args.config,
            client_id=args.client_id,
            client_secret=args.client_secret,
        )
        return 0

    # Load configuration
    config: dict[str, Any] = load_config(args.config) or {}

    # Handle show-config
    if args.show_config:
        from monzo_client.setup import show_current_config

        if config:
            show_current_config(config)
        else:
            print("No configuration found.")
            print("Run 'monzo-client --setup' to create one.")
        return 0

    client_id, client_secret = get_client_credentials(config, args.client_id, args.client_secret)
    api_url = get_api_url(config, args.api_url)
    redirect_uri = args.redirect_uri or config.get("redirect_uri")

    try:
        if args.authorize_url or args.exchange_code:
            if not client_id or not client_secret:
                print("Error: Client ID and secret required. Use --client-id/--client-secret "
                      "or run 'monzo-client --setup'", file=sys.stderr)
                return 1

            with AuthorizationClient(client_id, client_secret, base_url=api_url) as auth:
                if args.authorize_url:
                    print(auth.build_authorize_url(args.state, redirect_uri))
                    return 0

                token = auth.exchange_authorization_code(args.exchange_code, redirect_uri)

            saved = _save_token(config, token, args.config)
            print(f"Logged in as user {token.user_id}. Token saved to {saved}")
            return 0

        token = get_access_token(config)
        if token is None:
            print("Error: Not logged in. Run 'monzo-client --setup' first.", file=sys.stderr)
            return 1

        with MonzoClient(
            token,
            client_id=client_id,
            client_secret=client_secret,
            base_url=api_url,
        ) as client:
            if args.refresh:
                new_token = client.refresh_access_token()
                saved = _save_token(config, new_token, args.config)
                print(f"Token refreshed, expires at {new_token.expires_at}. Saved to {saved}")
                return 0

            if client.is_token_expired():
                print("Warning: access token has expired. Run 'monzo-client --refresh'.",
                      file=sys.stderr)

            if args.accounts:
                for account in client.list_accounts():
                    print(f"  {account.id}  {account.description}  (opened {account.created:%Y-%m-%d})")
                return 0

            if args.balance:
                balance = client.get_balance(args.balance)
                print(f"Balance:     {format_amount(balance.balance, balance.currency)}")
                print(f"Spent today: {format_amount(balance.spend_today, balance.currency)}")
                return 0

            if args.transactions:
                pagination = None
                if args.limit or args.since or args.before:
                    pagination = build_pagination(args.limit, args.since, args.before)

                transactions = client.list_transactions(args.transactions, args.expand, pagination)
                for tx in transactions:
                    print_transaction(tx)
                print(f"\n{len(transactions)} transactions", file=sys.stderr)
                return 0

            if args.transaction:
                print_transaction(client.get_transaction(args.transaction, args.expand))
                return 0

            if args.webhooks:
                for webhook in client.list_webhooks(args.webhooks):
                    print(f"  {webhook.id}  {webhook.url}")
                return 0

    except (MonzoError, requests.RequestException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


def build_pagination(limit: int | None, since: str | None, before: str | None) -> PaginationOptions:
    """Build pagination options from CLI values.

    ``since`` is treated as a timestamp when it parses as one, otherwise as a
    transaction id.
    """
    since_time: datetime | None = None
    since_id: str | None = None
    if since:
        try:
            since_time = parse_timestamp(since)
        except MonzoError:
            since_id = since

    before_time = parse_timestamp(before) if before else None

    return PaginationOptions(
        limit=limit,
        since_time=since_time,
        since_id=since_id,
        before_time=before_time,
    )


if __name__ == "__main__":
    sys.exit(main())
