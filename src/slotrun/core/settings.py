"""Runtime settings shared by the CLI and the API.

``RuntimeSettings`` holds everything the core needs to locate instruction
sets, archive tabular output and run fragments.  The API extends it with
transport knobs (see :mod:`slotrun.api.settings`).

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not runtime
    - **Environment-driven:** Reads ``SLOTRUN_*`` env vars and ``.env`` files
    - **Sensible defaults:** Works out of the box under ``~/.slotrun``

Examples:
    >>> settings = RuntimeSettings(data_dir="/srv/slots")
    >>> settings.sets_dir
    PosixPath('/srv/slots/instructionSets')

Tags:
    settings, configuration, pydantic, environment, slotrun
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """Settings for the slot runtime core.

    Order of precedence (highest → lowest):
        1. Constructor arguments
        2. Environment variables (``SLOTRUN_SETS_DIR``, etc.)
        3. ``.env`` file
        4. Defaults below

    Fields
    ──────
    data_dir            : Base directory for sets and the content store
    sets_dir            : Directory holding ``*.txt`` instruction sets
    store_root          : Root of the sharded content store
    store_base_url      : URL prefix the store root is served under
    shard_levels        : Number of two-hex-char directory levels
    shard_hash          : Digest used for shard paths
    archive_enabled     : Archive tabular output of successful slots
    execution_strategy  : ``in_process`` (default) or ``subprocess``
    slot_timeout        : Per-fragment time limit in seconds (unset = none)
    log_level / json_logs / debug : Observability
    """

    model_config = SettingsConfigDict(
        env_prefix="SLOTRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".slotrun",
        description="Base directory for instruction sets and archived output",
    )
    sets_dir: Path | None = Field(default=None, description="Instruction set directory")
    store_root: Path | None = Field(default=None, description="Content store root")
    store_base_url: str = Field(default="/csv", description="Public URL prefix of the store root")
    shard_levels: int = Field(default=3, ge=1, le=8, description="Shard directory depth")
    shard_hash: Literal["md5", "sha256"] = Field(default="md5", description="Shard digest")
    archive_enabled: bool = Field(default=True, description="Archive tabular slot output")

    # ── Execution ────────────────────────────────────────────────
    execution_strategy: Literal["in_process", "subprocess"] = "in_process"
    slot_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Per-fragment timeout in seconds; unset means no limit",
    )

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool | None = None

    @model_validator(mode="after")
    def _derive_directories(self) -> RuntimeSettings:
        self.data_dir = self.data_dir.expanduser()
        if self.sets_dir is None:
            self.sets_dir = self.data_dir / "instructionSets"
        if self.store_root is None:
            self.store_root = self.data_dir / "csv"
        self.sets_dir = self.sets_dir.expanduser()
        self.store_root = self.store_root.expanduser()
        return self
