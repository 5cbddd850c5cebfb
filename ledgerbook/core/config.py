"""
Application settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_bool_nature(value: str) -> bool:
    """Parse LEDGERBOOK_UNKNOWN_LEDGER_NATURE into a debit-nature flag."""
    normalized = value.strip().lower()
    if normalized in ("debit", "dr"):
        return True
    if normalized in ("credit", "cr", ""):
        return False
    raise ValueError(f"Unsupported ledger nature: {value}")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Immutable so that report computations never observe a change
    between two reads of the same request.
    """

    database_type: str = "sqlite"
    database_path: str = "./data/ledgerbook.db"
    db_host: str = "localhost"
    db_port: str = "5432"
    db_name: str = "ledgerbook"
    db_user: str = "postgres"
    db_password: str = "postgres"
    log_level: str = "INFO"
    log_file: str | None = None
    unknown_ledger_debit_nature: bool = False
    financial_year_start_month: int = 4

    @property
    def database_url(self) -> str:
        if self.database_type == "sqlite":
            return f"sqlite:///{self.database_path}"
        elif self.database_type == "postgresql":
            return (
                f"postgresql://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        else:
            raise ValueError(f"Unsupported database type: {self.database_type}")


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    fy_month = int(os.getenv("LEDGERBOOK_FY_START_MONTH", "4"))
    if not 1 <= fy_month <= 12:
        raise ValueError(f"LEDGERBOOK_FY_START_MONTH out of range: {fy_month}")

    return Settings(
        database_type=os.getenv("DATABASE_TYPE", "sqlite"),
        database_path=os.getenv("DATABASE_PATH", "./data/ledgerbook.db"),
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=os.getenv("DB_PORT", "5432"),
        db_name=os.getenv("DB_NAME", "ledgerbook"),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        log_level=os.getenv("LEDGERBOOK_LOG_LEVEL", "INFO"),
        log_file=os.getenv("LEDGERBOOK_LOG_FILE") or None,
        unknown_ledger_debit_nature=_env_bool_nature(
            os.getenv("LEDGERBOOK_UNKNOWN_LEDGER_NATURE", "credit")
        ),
        financial_year_start_month=fy_month,
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
