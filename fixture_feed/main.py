from __future__ import annotations

import argparse
import logging
import pathlib
from typing import List, Optional

import orjson

from .config import ConfigError, PipelineConfig, load_config
from .pipeline import build
from .utils import OutputWriteError, parse_instant, read_json

log = logging.getLogger("fixture_feed")

REQUIRED_FIELDS = ("startDate", "homeTeam", "awayTeam", "competition", "broadcast")


def build_cmd(cfg: PipelineConfig, output: pathlib.Path) -> None:
    doc = build(cfg, output)
    log.info("wrote %s with %d fixtures today and %d upcoming", output, len(doc.today), len(doc.future))


def _fixture_problems(name: str, items: object) -> List[str]:
    if not isinstance(items, list):
        return [f"{name} not a list"]
    problems: List[str] = []
    last = None
    for idx, f in enumerate(items):
        if not isinstance(f, dict):
            problems.append(f"{name}[{idx}] not an object")
            continue
        missing = [k for k in REQUIRED_FIELDS if k not in f]
        if missing:
            problems.append(f"{name}[{idx}] missing {', '.join(missing)}")
            continue
        for side in ("homeTeam", "awayTeam"):
            if not (isinstance(f[side], dict) and f[side].get("name")):
                problems.append(f"{name}[{idx}] {side} has no name")
        start = parse_instant(f["startDate"])
        if start is None:
            problems.append(f"{name}[{idx}] bad startDate {f['startDate']!r}")
            continue
        if last is not None and start < last:
            problems.append(f"{name}[{idx}] out of order")
        last = start
    return problems


def validate_cmd(cfg: PipelineConfig, output: pathlib.Path) -> bool:
    if not output.exists():
        log.error("missing %s", output)
        return False
    try:
        data = read_json(output)
    except orjson.JSONDecodeError as e:
        log.error("%s is not valid JSON: %s", output, e)
        return False
    if cfg.output.layout == "flat":
        problems = _fixture_problems("fixtures", data)
    elif not isinstance(data, dict):
        problems = [f"{output.name} not an object"]
    else:
        problems = _fixture_problems("today", data.get("today")) + _fixture_problems("future", data.get("future"))
    for p in problems:
        log.error(p)
    if problems:
        return False
    log.info("ok")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="fixture-feed", description="Football fixtures pipeline")
    parser.add_argument("--config", type=pathlib.Path, default=None, help="YAML config (default: packaged config.yaml)")
    parser.add_argument("--output", type=pathlib.Path, default=None, help="Output JSON path (overrides config)")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="cmd")
    sub.add_parser("build")
    sub.add_parser("validate")
    sub.add_parser("all")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        log.error("%s", e)
        return 1
    output = args.output or pathlib.Path(cfg.output.path)
    cmd = args.cmd or "build"

    try:
        if cmd in ("build", "all"):
            build_cmd(cfg, output)
        if cmd in ("validate", "all") and not validate_cmd(cfg, output):
            return 1
    except OutputWriteError as e:
        log.error("run failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
