#!/usr/bin/env python3
"""
Attio Trust - Command Line Entry Point

OAuth token operations, scope algebra and webhook signing from the shell.
Credentials are read from the environment (or a .env file).
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import TrustConfig
from .core.errors import AttioTrustError
from .core.logging_utils import setup_logging
from .oauth import scopes as scope_algebra
from .oauth.client import OAuthClient
from .webhook.signature import WebhookVerifier

OAUTH_COMMANDS = {"authorize-url", "exchange", "refresh", "revoke", "introspect"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attio-trust",
        description="Attio OAuth, scope and webhook utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage:
  attio-trust authorize-url --scope record:read --scope note:write
  attio-trust exchange --code <authorization-code>
  attio-trust refresh --refresh-token <refresh-token>
  attio-trust revoke --token <access-token>
  attio-trust introspect --token <access-token>
  attio-trust scopes expand record:write list:write
  attio-trust webhook sign --payload-file body.json
  attio-trust webhook verify --payload-file body.json --header "t=... v1=..."

Environment:
  ATTIO_CLIENT_ID, ATTIO_CLIENT_SECRET, ATTIO_REDIRECT_URI  OAuth commands
  ATTIO_WEBHOOK_SECRET                                      webhook commands
        """
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    authorize = subparsers.add_parser("authorize-url", help="Build an authorization URL")
    authorize.add_argument("--scope", action="append", default=[], help="Scope to request (repeatable)")
    authorize.add_argument("--state", default=None, help="CSRF state (generated when omitted)")

    exchange = subparsers.add_parser("exchange", help="Exchange an authorization code for a token")
    exchange.add_argument("--code", required=True)

    refresh = subparsers.add_parser("refresh", help="Refresh an access token")
    refresh.add_argument("--refresh-token", required=True)

    revoke = subparsers.add_parser("revoke", help="Revoke a token (best effort)")
    revoke.add_argument("--token", required=True)

    introspect = subparsers.add_parser("introspect", help="Introspect a token")
    introspect.add_argument("--token", required=True)

    scopes_parser = subparsers.add_parser("scopes", help="Scope algebra")
    scopes_parser.add_argument("operation", choices=["validate", "expand", "minimize", "describe"])
    scopes_parser.add_argument("scopes", nargs="*")

    webhook = subparsers.add_parser("webhook", help="Sign or verify webhook payloads")
    webhook.add_argument("operation", choices=["sign", "verify"])
    webhook.add_argument("--payload-file", required=True, help="Raw payload file, or - for stdin")
    webhook.add_argument("--header", default=None, help="Signature header to verify")
    webhook.add_argument("--timestamp", type=int, default=None, help="Unix timestamp to sign with")
    webhook.add_argument("--secret", default=None, help="Signing secret (default: ATTIO_WEBHOOK_SECRET)")
    webhook.add_argument("--tolerance", type=int, default=None, help="Replay window in seconds")

    return parser


def _emit(data) -> None:
    print(json.dumps(data, indent=2))


def _read_payload(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _run_oauth(args, config: TrustConfig, transport) -> int:
    if not config.is_oauth_configured():
        print("Attio OAuth credentials not configured.", file=sys.stderr)
        print("Please set ATTIO_CLIENT_ID, ATTIO_CLIENT_SECRET and ATTIO_REDIRECT_URI in .env file or environment variables.", file=sys.stderr)
        return 1

    with OAuthClient.from_config(config, transport=transport) as client:
        if args.command == "authorize-url":
            request = client.authorization_url(scopes=args.scope, state=args.state)
            _emit({"url": request.url, "state": request.state})
        elif args.command == "exchange":
            _emit(client.exchange_code_for_token(args.code).to_dict())
        elif args.command == "refresh":
            _emit(client.refresh_token(args.refresh_token).to_dict())
        elif args.command == "revoke":
            result = client.revoke_token_detailed(args.token)
            _emit({"revoked": result.success, "reason": result.reason})
            return 0 if result.success else 1
        elif args.command == "introspect":
            _emit(client.introspect_token(args.token))
    return 0


def _run_scopes(args) -> int:
    if args.operation == "validate":
        _emit({"scopes": scope_algebra.validate(args.scopes)})
    elif args.operation == "expand":
        _emit({"scopes": scope_algebra.expand(args.scopes)})
    elif args.operation == "minimize":
        _emit({"scopes": scope_algebra.minimize(args.scopes)})
    elif args.operation == "describe":
        names = args.scopes or sorted(scope_algebra.VALID_SCOPES)
        _emit({name: scope_algebra.description(name) for name in names})
    return 0


def _run_webhook(args, config: TrustConfig) -> int:
    secret = args.secret or config.webhook_secret
    if not secret:
        print("Webhook secret not configured. Pass --secret or set ATTIO_WEBHOOK_SECRET.", file=sys.stderr)
        return 1

    tolerance = args.tolerance if args.tolerance is not None else config.webhook_tolerance
    verifier = WebhookVerifier(secret, tolerance=tolerance)
    payload = _read_payload(args.payload_file)

    if args.operation == "sign":
        _emit({"header": verifier.sign(payload, timestamp=args.timestamp)})
        return 0

    if not args.header:
        print("--header is required for verify", file=sys.stderr)
        return 1
    valid = verifier.verify(payload, args.header)
    _emit({"valid": valid})
    return 0 if valid else 1


def main(argv: Optional[List[str]] = None, transport=None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = TrustConfig()
        if args.log_level:
            config.log_level = args.log_level
        logger = setup_logging(config)
        logger.debug(f"Configuration: {config.get_info()}")

        if args.command in OAUTH_COMMANDS:
            return _run_oauth(args, config, transport)
        if args.command == "scopes":
            return _run_scopes(args)
        return _run_webhook(args, config)

    except AttioTrustError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
