"""
Configuration settings for the user search demo.

Uses Pydantic Settings to load environment variables for corpus size, batching,
pagination, generation windows and logging. Windows are validated once at
startup so that a bad date fails before the index is built.
"""
from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from usersearch.domain.models import DateWindow


class Settings(BaseSettings):
    # Corpus
    user_count: int = Field(100, ge=0, alias="USER_COUNT")
    batch_size: int = Field(10, ge=1, alias="BATCH_SIZE")
    id_offset: int = Field(1000, ge=0, alias="ID_OFFSET")
    seed: Optional[int] = Field(None, alias="SEED")

    # Generation windows
    created_from: date = Field(date(2019, 4, 1), alias="CREATED_FROM")
    created_to: date = Field(date(2020, 3, 2), alias="CREATED_TO")
    last_online_from: date = Field(date(2020, 3, 3), alias="LAST_ONLINE_FROM")
    last_online_to: date = Field(date(2020, 6, 2), alias="LAST_ONLINE_TO")
    birth_from: date = Field(date(1955, 8, 22), alias="BIRTH_FROM")
    birth_to: date = Field(date(2002, 8, 1), alias="BIRTH_TO")

    # Search
    page_size: int = Field(5, gt=0, alias="PAGE_SIZE")
    show_facets: bool = Field(False, alias="SHOW_FACETS")

    # Application
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_windows(self) -> "Settings":
        bounds = {
            "created": (self.created_from, self.created_to),
            "last_online": (self.last_online_from, self.last_online_to),
            "birth": (self.birth_from, self.birth_to),
        }
        for name, (start, end) in bounds.items():
            if start > end:
                raise ValueError(f"{name} window starts after it ends ({start} > {end})")
        if self.created_to >= self.last_online_from:
            raise ValueError("created window must end before the last-online window starts")
        if self.birth_to >= date.today():
            raise ValueError("birth window must end before today")
        return self

    @property
    def created_window(self) -> DateWindow:
        return DateWindow(start=self.created_from, end=self.created_to)

    @property
    def last_online_window(self) -> DateWindow:
        return DateWindow(start=self.last_online_from, end=self.last_online_to)

    @property
    def birth_window(self) -> DateWindow:
        return DateWindow(start=self.birth_from, end=self.birth_to)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
