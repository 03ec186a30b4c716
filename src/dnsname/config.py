from __future__ import annotations

import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]

PSL_FILENAME = "public_suffix_list.dat"
PSL_URL = "https://publicsuffix.org/list/public_suffix_list.dat"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERVICE_HOST = "127.0.0.1"
DEFAULT_SERVICE_PORT = 8788


def get_data_dir() -> Path:
    return Path(os.getenv("DNSNAME_DATA_DIR", REPO_ROOT / "data"))


def get_psl_path() -> Path:
    return Path(os.getenv("DNSNAME_PSL_PATH", get_data_dir() / PSL_FILENAME))


def get_psl_url() -> str:
    return os.getenv("DNSNAME_PSL_URL", PSL_URL)


def get_log_level() -> str:
    return os.getenv("DNSNAME_LOG_LEVEL", DEFAULT_LOG_LEVEL)
