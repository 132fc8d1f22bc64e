"""Configuration Pydantic models for package-curator."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CuratorConfig(BaseModel):
    """Configuration for package-curator.

    All fields are optional so partial configuration files are valid.
    """

    model_config = {"extra": "forbid"}

    snapshot: Optional[str] = Field(
        default=None,
        description="Path of the run snapshot file to query when none is given.",
    )
    default_limit: Optional[int] = Field(
        default=None,
        ge=0,
        description="Page size used by the list command when --limit is not given.",
    )
    default_sort: Optional[List[str]] = Field(
        default=None,
        description="Sort keys like 'purl:desc' used when --sort is not given.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Log level of the package_curator logger.",
    )
