from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Sequence

from .adapters.cloudflare.jwt_decoder import AccessJWTDecoder
from .adapters.cloudflare.key_fetcher import KeySetFetcher
from .application.use_cases.authenticate import AuthenticateTokenUseCase
from .domain.exceptions import KeySetFetchError
from .logging_config import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="edge-access",
        description="Inspect identity edge key sets and verify edge tokens",
    )
    parser.add_argument(
        "--domain",
        "-d",
        default=os.getenv("CF_ACCESS_TEAM_DOMAIN"),
        help="Identity edge team domain (default: env CF_ACCESS_TEAM_DOMAIN)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="HTTP timeout in seconds for the key set request.",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        help="Log level for diagnostic output on stderr.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("keys", help="Fetch the key set and list usable key ids.")

    verify = sub.add_parser("verify", help="Verify a token and print its claims.")
    verify.add_argument("--token", "-t", required=True, help="Compact JWT to verify.")
    verify.add_argument(
        "--audience",
        "-a",
        default=os.getenv("CF_ACCESS_AUD"),
        help="Expected audience (default: env CF_ACCESS_AUD; omitted means no check).",
    )
    verify.add_argument("--issuer", help="Expected issuer (omitted means no check).")

    args = parser.parse_args(args=argv)
    if not args.domain:
        parser.error("--domain is required (or set CF_ACCESS_TEAM_DOMAIN)")
    return args


def _run(args: argparse.Namespace) -> dict[str, Any]:
    fetcher = KeySetFetcher(timeout=args.timeout)

    if args.command == "keys":
        keys = fetcher.get_keys(args.domain)
        return {"ok": True, "domain": args.domain, "kids": sorted(keys)}

    decoder = AccessJWTDecoder(
        key_source=fetcher,
        audience=args.audience,
        issuer=args.issuer,
    )
    result = AuthenticateTokenUseCase(token_decoder=decoder, domain=args.domain).execute(args.token)
    if result.ok:
        return {"ok": True, "claims": dict(result.payload)}
    return {"ok": False, "failure": result.failure.value, "error": str(result.error)}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level, json_logs=False, stream=sys.stderr)

    try:
        summary = _run(args)
    except KeySetFetchError as exc:
        summary = {"ok": False, "failure": exc.kind.value, "error": str(exc)}

    json.dump(summary, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0 if summary["ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
