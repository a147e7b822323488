from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Paths; relative paths resolve against the working directory.
    # Files default to entries inside data_dir.
    data_dir: Path = Path("data")
    snapshot_path: Path | None = None
    db_path: Path | None = None
    seed_path: Path | None = None

    # Storage
    storage_backend: Literal["json", "duckdb", "memory"] = "json"
    storage_key: str = "opportunityBoard"  # single named entry holding the snapshot

    # First run
    seed_on_first_run: bool = True

    # Server
    host: str = "127.0.0.1"
    port: int = 8766
    log_level: str = "INFO"

    model_config = {"env_prefix": "OPPORTUNITY_BOARD_"}

    @model_validator(mode="after")
    def _default_paths(self) -> Settings:
        if self.snapshot_path is None:
            self.snapshot_path = self.data_dir / "board.json"
        if self.db_path is None:
            self.db_path = self.data_dir / "board.duckdb"
        if self.seed_path is None:
            self.seed_path = self.data_dir / "seed.yaml"
        return self


settings = Settings()
