from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _title_from_filename(value: str) -> str:
    # "hero-section" -> "Hero Section"
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), value.replace("-", " "))


def _slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9-]", "-", value.lower())


class PatternMetadata(BaseModel):
    """Header fields of a PHP block pattern file."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: str = ""
    categories: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    viewport_width: int = Field(1280, alias="viewportWidth")
    block_types: List[str] = Field(default_factory=list, alias="blockTypes")
    post_types: List[str] = Field(default_factory=list, alias="postTypes")
    inserter: bool = True

    @field_validator("categories", "keywords", "block_types", "post_types", mode="before")
    @classmethod
    def _split_csv(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @classmethod
    def from_filename(
        cls,
        filename: str,
        *,
        title: Optional[str] = None,
        slug: Optional[str] = None,
        namespace: Optional[str] = None,
        **options,
    ) -> "PatternMetadata":
        base_slug = slug or _slugify(filename)
        return cls(
            title=title or _title_from_filename(filename),
            slug=f"{namespace}/{base_slug}" if namespace else base_slug,
            **{k: v for k, v in options.items() if v is not None},
        )
