"""Environment-driven configuration for the Klar export service."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WeightUnit(str, Enum):
    """Weight units a store can be configured with."""

    KGS = "kgs"
    LBS = "lbs"


@dataclass(frozen=True)
class Config:
    """Service configuration.

    Attributes:
        weight_unit: Unit product weights are stored in.
        log_level: Minimum level for log output.
        log_file: Optional path of a rotating log file.
    """

    weight_unit: WeightUnit = WeightUnit.KGS
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Config":
        """Build the configuration from environment variables.

        Raises:
            ValueError: If KLAR_WEIGHT_UNIT is not a known unit.
        """
        raw_unit = os.getenv("KLAR_WEIGHT_UNIT", WeightUnit.KGS.value).strip().lower()
        try:
            weight_unit = WeightUnit(raw_unit)
        except ValueError:
            raise ValueError(f"Unsupported KLAR_WEIGHT_UNIT: {raw_unit!r}") from None

        return cls(
            weight_unit=weight_unit,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE") or None,
        )


config = Config.from_env()
