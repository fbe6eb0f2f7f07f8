"""Import run settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .env import optional_env_var, positive_int_env_var
from .errors import ConfigurationError

DEFAULT_BATCH_SIZE = 5000


class CheckpointMode(StrEnum):
    """How a catch-up run advances the stored checkpoint."""

    RANGE = "range"
    GRANULAR = "granular"


@dataclass(frozen=True, slots=True)
class ImportConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    checkpoint_mode: CheckpointMode = CheckpointMode.GRANULAR

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ConfigurationError(f"batch_size must be positive, got {self.batch_size}")


def get_import_config() -> ImportConfig:
    raw_mode = optional_env_var("ADDRSYNC_CHECKPOINT_MODE")
    try:
        mode = CheckpointMode(raw_mode.lower()) if raw_mode else CheckpointMode.GRANULAR
    except ValueError as exc:
        choices = ", ".join(member.value for member in CheckpointMode)
        raise ConfigurationError(
            f"ADDRSYNC_CHECKPOINT_MODE must be one of {choices}, got {raw_mode!r}"
        ) from exc
    return ImportConfig(
        batch_size=positive_int_env_var("ADDRSYNC_BATCH_SIZE", default=DEFAULT_BATCH_SIZE),
        checkpoint_mode=mode,
    )
