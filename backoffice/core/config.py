from dotenv import load_dotenv
load_dotenv()
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    """
    Runtime configuration for the client status filter service.

    Values can be overridden via environment variables if needed.
    """

    # Company registry snapshot (CSV or parquet) supplied by the data-access layer.
    COMPANY_REGISTRY_PATH: Path = Path(
        os.getenv("COMPANY_REGISTRY_PATH", "data/processed/companies.parquet")
    )

    # How a membership with a start date but no end date is treated:
    # "still_active" (open-ended) or "require_both" (never active).
    OPEN_ENDED_MEMBERSHIP: str = os.getenv("OPEN_ENDED_MEMBERSHIP", "still_active")
    FAR_FUTURE_DATE: str = os.getenv("FAR_FUTURE_DATE", "9999-12-31")

    # Additional service categories beyond acc/audit/sheria/imm.
    EXTRA_CATEGORIES: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("EXTRA_CATEGORIES", ""))
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:5173")
        )
    )


settings = Settings()
