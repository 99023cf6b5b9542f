from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modules.change_maker.core.debug import DebugLimits

BASE_DIR = Path(__file__).resolve().parent
ROOT_DIR = BASE_DIR.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VENDBOX_",
        env_file=".env",
        extra="ignore",
    )

    # request bounds
    max_register_slots: int = Field(default=64, ge=1)
    max_payment_amount: int = Field(default=1_000_000, ge=0)

    # debug caps
    debug_preview_amount: int = Field(default=500, ge=0)
    debug_trace_lines: int = Field(default=120, ge=0)
    naive_amount_cap: int = Field(default=8000, ge=0)
    naive_call_budget: int = Field(default=5000, ge=1)

    # logging
    log_level: str = "INFO"
    log_json: bool = True

    shared_templates: Path | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        if v is None or str(v).strip() == "":
            return "INFO"
        return str(v).strip().upper()

    def debug_limits(self) -> DebugLimits:
        return DebugLimits(
            preview_amount=self.debug_preview_amount,
            trace_lines=self.debug_trace_lines,
            naive_amount=self.naive_amount_cap,
            naive_calls=self.naive_call_budget,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def shared_templates_dir(root_dir: Path = ROOT_DIR) -> Path:
    configured = get_settings().shared_templates
    if configured:
        return Path(configured)
    return root_dir / "vendbox" / "templates"
