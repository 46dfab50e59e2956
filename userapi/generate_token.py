"""
Standalone token issuance.

Reads JWT_SECRET (and the other token settings) from the environment or
`.env` and prints a signed token to stdout. Exits with status 1 if the
secret is not set or the settings are invalid.

    userapi-token --subject alice --ttl-hours 24
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from userapi.auth.jwt import TokenCodec
from userapi.config import Settings

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue a signed bearer token.")
    parser.add_argument(
        "--subject",
        default=settings.token_subject,
        help="value of the 'user' claim (default: %(default)s)",
    )
    parser.add_argument(
        "--ttl-hours",
        type=int,
        default=settings.token_ttl_hours,
        help="hours until the token expires (default: %(default)s)",
    )
    return parser


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    if settings is None:
        try:
            settings = Settings()
        except ValidationError as e:
            logger.error(f"Invalid configuration: {e}")
            sys.exit(1)

    args = build_parser(settings).parse_args(argv)

    if not settings.jwt_secret:
        logger.error("JWT_SECRET environment variable not set")
        sys.exit(1)

    settings = settings.model_copy(update={"token_ttl_hours": args.ttl_hours})
    codec = TokenCodec.from_settings(settings)
    print(codec.issue(subject=args.subject))
    return 0


if __name__ == "__main__":
    sys.exit(main())
