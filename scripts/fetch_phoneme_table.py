"""
scripts/fetch_phoneme_table.py — Download the full phoneme table for offline use.

Fetches the word → syllable/phoneme table, validates it, and writes it to a
local JSON file. Point ``phoneme_table.path`` in ``config/kairen.yaml`` at the
result. Run this ONCE with internet access.

Usage:
    python scripts/fetch_phoneme_table.py [--url URL] [--output PATH]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.constants import C  # noqa: E402
from lookup.http import build_session  # noqa: E402
from lookup.phoneme_table import PhonemeTable  # noqa: E402

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Configure stdout logging for the fetch script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def download_table(url: str, timeout_s: float) -> dict:
    """
    Download and validate the raw phoneme table.

    Args:
        url: Location of the JSON table.
        timeout_s: Request timeout in seconds.

    Returns:
        The raw ``{word: phonemes}`` mapping.

    Raises:
        SystemExit: If the download fails or the payload is not a valid table.
    """
    logger.info("Downloading %s", url)
    t0 = time.time()
    session = build_session()
    try:
        response = session.get(url, timeout=timeout_s)
        response.raise_for_status()
        raw = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Download failed: %s", exc)
        sys.exit(1)
    finally:
        session.close()

    try:
        table = PhonemeTable(raw, source=url)
    except ValueError as exc:
        logger.error("Payload is not a phoneme table: %s", exc)
        sys.exit(1)

    logger.info("Downloaded %d entries in %.1fs", len(table), time.time() - t0)
    return raw


def write_table(raw: dict, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as fh:
        json.dump(raw, fh, ensure_ascii=False)
    logger.info("Wrote %s (%.1f MB)", output, output.stat().st_size / 1e6)


def verify_table(output: Path) -> bool:
    """Reload the written file and check it parses as a table."""
    try:
        table = PhonemeTable.from_json(output)
    except (OSError, ValueError) as exc:
        logger.error("Verification failed: %s", exc)
        return False
    logger.info("Verification passed: %d entries", len(table))
    return True


def main() -> None:
    _setup_logging()

    parser = argparse.ArgumentParser(
        description="Download the Kairen phoneme table for offline use"
    )
    parser.add_argument("--url", default=C.PHONEME_TABLE_URL, help="Table URL")
    parser.add_argument(
        "--output", "--out",
        default="data/phoneme_table.json",
        help="Where to write the table (default: data/phoneme_table.json)",
    )
    parser.add_argument("--timeout", type=float, default=60.0, help="Request timeout (s)")
    args = parser.parse_args()

    output = Path(args.output)
    raw = download_table(args.url, args.timeout)
    write_table(raw, output)

    if not verify_table(output):
        sys.exit(1)

    logger.info("Set phoneme_table.path: %s in config/kairen.yaml to use it.", output)


if __name__ == "__main__":
    main()
