from __future__ import annotations

import logging
from pathlib import Path
from urllib.error import URLError
from urllib.request import Request, urlopen

from dnsname.config import PSL_FILENAME, get_data_dir, get_psl_path, get_psl_url
from dnsname.psl.labels import LabelCodec, idna_to_ascii
from dnsname.psl.rules import RuleIndex

logger = logging.getLogger(__name__)


def _fetch(url: str, timeout: int = 30) -> bytes:
    req = Request(url, headers={"User-Agent": "dnsname/0.1"})
    with urlopen(req, timeout=timeout) as resp:  # noqa: S310 - configured list URL
        return resp.read()


def download_suffix_list(
    url: str | None = None,
    output_dir: Path | None = None,
    fallback_local: Path | None = None,
) -> Path:
    output_dir = output_dir or get_data_dir()
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / PSL_FILENAME
    url = url or get_psl_url()

    logger.info("Downloading public suffix list from %s", url)
    try:
        payload = _fetch(url)
    except URLError as exc:
        if fallback_local and fallback_local.exists():
            logger.warning("Suffix list download failed (%s), using local fallback", exc)
            output_path.write_bytes(fallback_local.read_bytes())
            return output_path
        raise RuntimeError(
            "Failed to download the public suffix list. Provide --local path as fallback."
        ) from exc

    if not payload.strip():
        raise RuntimeError("Public suffix list download was empty")
    output_path.write_bytes(payload)
    return output_path


def read_suffix_list(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Public suffix list not found: {path}")
    return path.read_text(encoding="utf-8")


def load_rule_index(path: Path | None = None, codec: LabelCodec = idna_to_ascii) -> RuleIndex:
    path = path or get_psl_path()
    index = RuleIndex.build(read_suffix_list(path), codec=codec)
    logger.info("Loaded %d suffix rules from %s", index.rule_count, path)
    return index
