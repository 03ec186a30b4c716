from __future__ import annotations

import argparse

import uvicorn

from dnsname.config import DEFAULT_SERVICE_HOST, DEFAULT_SERVICE_PORT
from dnsname.logging_utils import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the dnsname classification service")
    parser.add_argument("--host", default=DEFAULT_SERVICE_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_SERVICE_PORT)
    args = parser.parse_args()
    configure_logging()
    uvicorn.run("dnsname.service.api:app", host=args.host, port=args.port, reload=False)


if __name__ == "__main__":
    main()
