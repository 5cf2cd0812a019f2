from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ArticleCreate(BaseModel):
    """Body for POST /articles."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1)
    subtitle: str = ""
    text: str = ""
    image: str = ""
    caption: str = ""
    author: str = ""
    author_image: str = ""


class ArticleUpdate(BaseModel):
    """Body for PUT /articles/{id}."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1)
    subtitle: Optional[str] = None
    text: Optional[str] = None
    image: Optional[str] = None
    caption: Optional[str] = None
    author: Optional[str] = None
    author_image: Optional[str] = None
