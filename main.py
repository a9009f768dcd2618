"""
main.py — Kairen transliterator command-line entry point.

Parses CLI args, loads the YAML config, builds the converter, and prints the
Kairen rendering of each input sentence (or the full per-token records with
``--json``).
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
import traceback
from typing import Iterable, List, Optional


# ──────────────────────────────────────────────────────────────
# Argument parsing
# ──────────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="kairen",
        description="Transliterate English sentences into Kairen",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument(
        "sentence",
        nargs="*",
        help="Sentence to convert; reads one sentence per line from stdin when omitted",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to a kairen.yaml file (defaults to KAIREN_CONFIG or config/kairen.yaml)",
    )
    p.add_argument(
        "--resolver",
        choices=["phoneme_set", "phonetic_alphabet"],
        default=None,
        help="Override the configured pronunciation source",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Print per-token records as JSON instead of the rendered text",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        default=None,
        help="Override the configured JSONL log level",
    )
    return p


# ──────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────

def _load(args: argparse.Namespace):
    """Load the config and apply CLI overrides."""
    from core.config import load_config

    config = load_config(args.config)
    if args.resolver is not None:
        config = dataclasses.replace(
            config, resolver=dataclasses.replace(config.resolver, kind=args.resolver),
        )
    if args.log_level is not None:
        config = dataclasses.replace(
            config, logging=dataclasses.replace(config.logging, level=args.log_level),
        )
    return config


def _sentences(args: argparse.Namespace) -> Iterable[str]:
    if args.sentence:
        yield " ".join(args.sentence)
        return
    for line in sys.stdin:
        line = line.rstrip("\n")
        if line.strip():
            yield line


def _emit(converter, sentence: str, as_json: bool) -> None:
    records = converter.convert(sentence)
    if as_json:
        print(json.dumps({
            "input": sentence,
            "output": converter.render(records),
            "records": [r.to_dict() for r in records],
        }, ensure_ascii=False))
    else:
        print(converter.render(records))


# ──────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point. Returns process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from core.logger import get_logger
    log = get_logger()

    try:
        config = _load(args)
    except (FileNotFoundError, ValueError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    log.info("main", "args_parsed", {
        "config": args.config,
        "resolver": config.resolver.kind,
        "json": args.json,
        "log_level": config.logging.level,
    })

    from pipeline.orchestrator import KairenConverter

    exit_code = 0
    converter = None
    try:
        converter = KairenConverter.from_config(config)
        for sentence in _sentences(args):
            _emit(converter, sentence, args.json)
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted", file=sys.stderr)
        exit_code = 130
    except Exception:                              # noqa: BLE001
        tb = traceback.format_exc()
        print(tb, file=sys.stderr)
        log.critical("main", "unhandled_exception", {"traceback": tb})
        exit_code = 1
    finally:
        if converter is not None:
            converter.close()
        log.flush()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
