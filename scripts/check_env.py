#!/usr/bin/env python3
"""
Environment Checker

Loads the application settings and reports missing or weak values before a
deploy. Exits with status 1 when any error is found.

Usage:
    python scripts/check_env.py
    python scripts/check_env.py --env-file=.env.production
    python scripts/check_env.py --strict     # Treat warnings as errors
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from edpsych.config import DEFAULT_JWT_SECRET, Settings

MIN_SECRET_LENGTH = 32
ASYNC_DRIVERS = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


def check_settings(settings: Settings) -> tuple[list[str], list[str]]:
    """Validate settings for the configured environment.

    Returns:
        (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not settings.DATABASE_URL.startswith(ASYNC_DRIVERS):
        errors.append(
            "DATABASE_URL must use an async driver (postgresql+asyncpg:// or sqlite+aiosqlite://)"
        )

    if not (settings.OPENAI_API_KEY or settings.ANTHROPIC_API_KEY):
        warnings.append(
            "No AI provider key set (OPENAI_API_KEY / ANTHROPIC_API_KEY); "
            "pacing plans will be rule-based"
        )

    if settings.is_production:
        if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET_KEY is still the default value")
        elif len(settings.JWT_SECRET_KEY) < MIN_SECRET_LENGTH:
            errors.append(f"JWT_SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters")

        if not settings.OAUTH_JWT_SECRET:
            errors.append("OAUTH_JWT_SECRET is required in production")

        if not settings.STRIPE_SECRET_KEY.startswith("sk_live_"):
            errors.append("STRIPE_SECRET_KEY must be a live key (sk_live_...) in production")

        if settings.DEBUG:
            warnings.append("DEBUG is enabled in production")
    else:
        if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            warnings.append("JWT_SECRET_KEY is the default value (fine for local development)")

    return errors, warnings


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Check EdPsych Connect environment settings")
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Custom .env file (default: .env)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors",
    )
    args = parser.parse_args()

    settings = Settings(_env_file=args.env_file) if args.env_file else Settings()

    print("🔍 EdPsych Connect Environment Check")
    print(f"🌍 Environment: {settings.ENVIRONMENT}\n")

    errors, warnings = check_settings(settings)

    for warning in warnings:
        print(f"⚠️  {warning}")
    for error in errors:
        print(f"❌ {error}")

    if errors or (args.strict and warnings):
        print(f"\n❌ {len(errors)} error(s), {len(warnings)} warning(s)")
        return 1

    print(f"\n✅ Environment OK ({len(warnings)} warning(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main())
