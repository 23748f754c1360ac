"""
Unit Tests for Operational Scripts

scripts/ is on the test path, so the scripts import as plain modules.
"""

from sqlalchemy import func, select

from check_env import check_settings
from edpsych.config import DEFAULT_JWT_SECRET, Settings
from edpsych.core.models import RestorativeFramework
from seed_frameworks import BUILTIN_FRAMEWORKS, seed_frameworks

STRONG_SECRET = "x" * 40  # pragma: allowlist secret


def production_settings(**overrides) -> Settings:
    fields = {
        "ENVIRONMENT": "production",
        "DATABASE_URL": "postgresql+asyncpg://edpsych:pw@db:5432/edpsych",
        "JWT_SECRET_KEY": STRONG_SECRET,
        "OAUTH_JWT_SECRET": STRONG_SECRET,
        "STRIPE_SECRET_KEY": "sk_live_abc",
        "OPENAI_API_KEY": "sk-openai",
    }
    fields.update(overrides)
    return Settings(**fields)


class TestCheckEnv:
    def test_good_production_config(self):
        errors, warnings = check_settings(production_settings())

        assert errors == []
        assert warnings == []

    def test_default_jwt_secret_in_production(self):
        errors, _ = check_settings(production_settings(JWT_SECRET_KEY=DEFAULT_JWT_SECRET))

        assert any("JWT_SECRET_KEY" in error for error in errors)

    def test_short_jwt_secret_in_production(self):
        errors, _ = check_settings(production_settings(JWT_SECRET_KEY="short"))

        assert any("at least 32" in error for error in errors)

    def test_missing_oauth_secret_and_test_stripe_key(self):
        errors, _ = check_settings(
            production_settings(OAUTH_JWT_SECRET="", STRIPE_SECRET_KEY="sk_test_abc")
        )

        assert any("OAUTH_JWT_SECRET" in error for error in errors)
        assert any("STRIPE_SECRET_KEY" in error for error in errors)

    def test_sync_database_url_is_an_error_anywhere(self):
        errors, _ = check_settings(
            Settings(ENVIRONMENT="local", DATABASE_URL="postgresql://u:p@localhost/edpsych")
        )

        assert any("async driver" in error for error in errors)

    def test_missing_ai_key_is_only_a_warning(self):
        errors, warnings = check_settings(production_settings(OPENAI_API_KEY=""))

        assert errors == []
        assert any("AI provider" in warning for warning in warnings)

    def test_local_defaults_pass(self):
        errors, _ = check_settings(
            Settings(ENVIRONMENT="local", DATABASE_URL="sqlite+aiosqlite:///./dev.db")
        )

        assert errors == []


class TestSeedFrameworks:
    async def test_seeds_builtin_frameworks(self, db_session):
        created = await seed_frameworks(db_session)

        assert created == len(BUILTIN_FRAMEWORKS) == 3
        titles = set((await db_session.execute(select(RestorativeFramework.title))).scalars())
        assert titles == {
            "Basic Restorative Enquiry",
            "Primary School Circle Time",
            "Secondary Peer Mediation",
        }

    async def test_is_idempotent(self, db_session):
        await seed_frameworks(db_session)

        assert await seed_frameworks(db_session) == 0
        count = (
            await db_session.execute(select(func.count()).select_from(RestorativeFramework))
        ).scalar_one()
        assert count == 3
