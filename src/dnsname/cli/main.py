from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path

from dnsname.config import get_data_dir, get_psl_url
from dnsname.data.suffix_list import download_suffix_list, load_rule_index
from dnsname.logging_utils import configure_logging
from dnsname.psl.errors import NameSyntaxError
from dnsname.psl.matcher import classify
from dnsname.psl.rules import RuleIndex

logger = logging.getLogger(__name__)

CSV_FIELDS = ["name", "rname", "suffix", "root", "registrable", "rule", "error"]


def _load_index(args: argparse.Namespace) -> RuleIndex:
    return load_rule_index(Path(args.psl) if args.psl else None)


def cmd_download_psl(args: argparse.Namespace) -> int:
    local = Path(args.local) if args.local else None
    output_dir = Path(args.output_dir) if args.output_dir else get_data_dir()
    path = download_suffix_list(url=args.url, output_dir=output_dir, fallback_local=local)
    print(f"Downloaded public suffix list -> {path}")
    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    index = _load_index(args)
    status = 0
    for raw_name in args.names:
        try:
            parsed = classify(raw_name, index, include_private=not args.icann_only)
        except NameSyntaxError as exc:
            print(f"{raw_name}: error: {exc}")
            status = 1
            continue
        if args.json:
            print(json.dumps(parsed.to_dict(), ensure_ascii=False))
        else:
            print(
                f"{parsed.name():<40} suffix={parsed.suffix() or '-'} "
                f"root={parsed.root() or '-'} registrable={parsed.registrable() or '-'}"
            )
    return status


def cmd_classify_file(args: argparse.Namespace) -> int:
    index = _load_index(args)
    input_path = Path(args.input)
    rows: list[dict[str, object]] = []
    for line in input_path.read_text(encoding="utf-8").splitlines():
        raw_name = line.strip()
        if not raw_name:
            continue
        try:
            parsed = classify(raw_name, index, include_private=not args.icann_only)
        except NameSyntaxError as exc:
            logger.warning("Skipping %r: %s", raw_name, exc)
            rows.append({"name": raw_name, "error": exc.reason})
            continue
        row = parsed.to_dict()
        rows.append({key: row[key] for key in CSV_FIELDS if key in row})

    if args.sort_by_rname:
        rows.sort(key=lambda row: str(row.get("rname") or ""))

    output_path = Path(args.output_csv)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    print(f"Classified {len(rows)} names -> {output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dnsname")
    sub = parser.add_subparsers(dest="command", required=True)

    d = sub.add_parser("download-psl")
    d.add_argument("--url", default=get_psl_url())
    d.add_argument("--output-dir", default=None)
    d.add_argument("--local", default=None)
    d.set_defaults(func=cmd_download_psl)

    c = sub.add_parser("classify")
    c.add_argument("names", nargs="+")
    c.add_argument("--psl", default=None)
    c.add_argument("--icann-only", action="store_true")
    c.add_argument("--json", action="store_true")
    c.set_defaults(func=cmd_classify)

    f = sub.add_parser("classify-file")
    f.add_argument("--input", required=True)
    f.add_argument("--output-csv", required=True)
    f.add_argument("--psl", default=None)
    f.add_argument("--icann-only", action="store_true")
    f.add_argument("--sort-by-rname", action="store_true")
    f.set_defaults(func=cmd_classify_file)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
