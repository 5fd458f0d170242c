from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    question: Optional[str] = Field(default=None, description="Free-text question from the visitor")


class SearchResponse(BaseModel):
    answer: Union[str, List[str]]
    intent: Optional[str] = None
    session_id: str


class ResetResponse(BaseModel):
    success: bool = True
