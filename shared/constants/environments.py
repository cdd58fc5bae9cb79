from enum import Enum


class Environment(str, Enum):
    """Where a unit runs; decides docs exposure."""

    PRODUCTION = "production"
    STAGING = "staging"
    TESTING = "testing"
    DEVELOPMENT = "development"

    @classmethod
    def parse(cls, env: str) -> "Environment":
        """Unknown names are treated as production, the most locked-down setting."""
        try:
            return cls(env.strip().lower())
        except ValueError:
            return cls.PRODUCTION

    @classmethod
    def exposes_docs(cls, env: str) -> bool:
        return cls.parse(env) is not cls.PRODUCTION
