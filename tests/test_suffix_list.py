from __future__ import annotations

from pathlib import Path
from urllib.error import URLError

import pytest

from dnsname.data import suffix_list
from dnsname.data.suffix_list import download_suffix_list, load_rule_index, read_suffix_list


def test_read_suffix_list_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_suffix_list(tmp_path / "missing.dat")


def test_load_rule_index_from_path(sample_psl_path: Path) -> None:
    index = load_rule_index(sample_psl_path)
    assert index.rule_count == 25


def test_load_rule_index_uses_configured_path(sample_psl_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("DNSNAME_PSL_PATH", str(sample_psl_path))
    assert load_rule_index().rule_count == 25


def test_download_writes_payload(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(suffix_list, "_fetch", lambda url, timeout=30: b"com\nnet\n")
    path = download_suffix_list(url="https://example.invalid/psl.dat", output_dir=tmp_path)
    assert path == tmp_path / "public_suffix_list.dat"
    assert path.read_text(encoding="utf-8") == "com\nnet\n"


def _unreachable(url: str, timeout: int = 30) -> bytes:
    raise URLError("unreachable")


def test_download_falls_back_to_local_copy(tmp_path: Path, sample_psl_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(suffix_list, "_fetch", _unreachable)
    path = download_suffix_list(output_dir=tmp_path / "out", fallback_local=sample_psl_path)
    assert path.read_bytes() == sample_psl_path.read_bytes()


def test_download_without_fallback_raises(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(suffix_list, "_fetch", _unreachable)
    with pytest.raises(RuntimeError):
        download_suffix_list(output_dir=tmp_path)


def test_download_rejects_empty_payload(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(suffix_list, "_fetch", lambda url, timeout=30: b"  \n")
    with pytest.raises(RuntimeError):
        download_suffix_list(output_dir=tmp_path)
