from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from dnsname.data.suffix_list import load_rule_index
from dnsname.psl.errors import NameSyntaxError, RuleSyntaxError
from dnsname.psl.matcher import classify
from dnsname.psl.rules import RuleIndex
from dnsname.service.schemas import ClassifyRequest, ClassifyResponse, RuleStatsResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="dnsname Public Suffix Service", version="0.1.0")

INDEX: RuleIndex | None = None


def _load_index() -> RuleIndex:
    global INDEX
    if INDEX is None:
        INDEX = load_rule_index()
    return INDEX


def _index_or_503() -> RuleIndex:
    try:
        return _load_index()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=503, detail="Suffix list missing. Run download-psl first.") from exc
    except RuleSyntaxError as exc:
        logger.exception("Suffix list is malformed")
        raise HTTPException(status_code=503, detail=f"Suffix list is malformed: {exc}") from exc


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/rules/stats", response_model=RuleStatsResponse)
def rule_stats() -> RuleStatsResponse:
    index = _index_or_503()
    return RuleStatsResponse(
        rule_count=index.rule_count,
        node_count=index.node_count(),
        sections=index.section_counts(),
    )


@app.post("/classify", response_model=ClassifyResponse)
def classify_endpoint(req: ClassifyRequest) -> ClassifyResponse:
    index = _index_or_503()
    try:
        parsed = classify(req.name, index, include_private=req.include_private)
    except NameSyntaxError as exc:
        raise HTTPException(
            status_code=422,
            detail={"reason": exc.reason, "position": exc.position},
        ) from exc
    return ClassifyResponse(**parsed.to_dict())
