"""Runtime configuration for a dispatch run."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_PLACEHOLDER = "{}"
DEFAULT_FIELD_SEPARATOR = " "


def default_workers() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True, slots=True)
class Settings:
    """Read-only settings shared by the producer, workers and collector."""

    command: str = ""
    workers: int = field(default_factory=default_workers)
    keep_order: bool = False
    dry_run: bool = False
    verbose: bool = False
    max_jobs: int = 0
    placeholder: str = DEFAULT_PLACEHOLDER
    field_separator: str = DEFAULT_FIELD_SEPARATOR

    @classmethod
    def from_env(cls, command: str = "") -> Settings:
        """Load defaults from ``KYANITE_*`` environment variables."""

        return cls(
            command=command,
            workers=int(os.getenv("KYANITE_JOBS", str(default_workers()))),
            keep_order=_env_bool("KYANITE_KEEP_ORDER", default=False),
            dry_run=_env_bool("KYANITE_DRY_RUN", default=False),
            verbose=_env_bool("KYANITE_VERBOSE", default=False),
            max_jobs=int(os.getenv("KYANITE_MAX_JOBS", "0")),
            placeholder=os.getenv("KYANITE_PLACEHOLDER", DEFAULT_PLACEHOLDER),
            field_separator=os.getenv("KYANITE_FIELD_SEPARATOR", DEFAULT_FIELD_SEPARATOR),
        )

    def validate(self) -> None:
        """Raise ``ValueError`` if the settings cannot drive a run."""

        if not self.command.strip():
            raise ValueError("Command template must not be empty.")
        if self.workers < 1:
            raise ValueError(f"Worker count must be >= 1, got {self.workers}.")
        if self.max_jobs < 0:
            raise ValueError(f"Max job count must be >= 0, got {self.max_jobs}.")
        if not self.placeholder:
            raise ValueError("Placeholder must not be empty.")
        if not self.field_separator:
            raise ValueError("Field separator must not be empty.")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
