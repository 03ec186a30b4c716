from __future__ import annotations

from pathlib import Path

import pytest

from dnsname.psl.rules import RuleIndex

SAMPLE_PSL = Path(__file__).parent / "data" / "public_suffix_sample.dat"


@pytest.fixture
def sample_psl_path() -> Path:
    return SAMPLE_PSL


@pytest.fixture
def sample_index() -> RuleIndex:
    return RuleIndex.build(SAMPLE_PSL.read_text(encoding="utf-8"))
