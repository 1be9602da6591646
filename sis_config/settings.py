"""
Settings schema for the school finance ledger.

A single frozen dataclass holds everything the ledger reads at runtime:
database connection and pool sizing, log level, and the few domain
constants that schools occasionally rename (tuition bill type, debt
category, notification titles).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

DEFAULT_DATABASE_URL = "postgresql+psycopg2://postgres@localhost:5432/sdit_management"


@dataclass(frozen=True)
class Settings:
    """Runtime settings.  Build with ``sis_config.get_settings()``."""

    database_url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    log_level: str = "INFO"

    default_bill_type: str = "SPP"
    debt_category: str = "Hutang"
    student_bill_title: str = "Tagihan Baru"
    parent_bill_title: str = "Tagihan Baru untuk Anak Anda"

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def to_dict(self, *, redact: bool = True) -> dict[str, Any]:
        """Settings as a dict; the database password is masked by default."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        if redact:
            data["database_url"] = _redact_url(self.database_url)
        return data


def _redact_url(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    credentials, _, host = rest.rpartition("@")
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}" if ":" in credentials else url
