from __future__ import annotations

from pydantic import BaseModel, Field


class ClassifyRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    include_private: bool = True


class ClassifyResponse(BaseModel):
    name: str
    rname: str
    suffix: str | None
    root: str | None
    registrable: str | None
    rule: str | None
    section: str | None
    is_rooted: bool


class RuleStatsResponse(BaseModel):
    rule_count: int
    node_count: int
    sections: dict[str, int]
