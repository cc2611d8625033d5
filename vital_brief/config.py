from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class VitalBriefSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VITAL_BRIEF_", env_nested_delimiter="__")

    out_dir: Path = Path("./out")
    garmin_token_dir: Path = Path("./out/garmin_tokens")
    history_days: int = 28
    min_baseline_samples: int = 7
    use_mock_source: bool = True
    mock_seed: int = 42
    fetch_retries: int = 3
    fetch_backoff_s: float = 5.0

    @property
    def db_path(self) -> Path:
        return self.out_dir / "vital_brief.duckdb"
