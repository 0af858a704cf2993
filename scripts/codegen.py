#!/usr/bin/env python3
"""Regenerate the contract bindings from the repository layout.

Patches ``contracts/transmuter/schema/transmuter.json`` with the built-in
definitions, then writes bindings for every directory under ``contracts/``
into ``sdk/contracts/``.

Usage:
  python scripts/codegen.py [--root PATH] [--out PATH] [--no-patch] [--verbose]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from contractgen.build import run_build
from contractgen.config import get_config
from contractgen.errors import ContractgenError
from contractgen.utils.logging import setup_logging

ROOT = Path(__file__).resolve().parents[1]


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--root", type=Path, default=ROOT, help="Repository root holding contracts/")
    ap.add_argument("--out", type=Path, default=None, help="Output directory (default: <root>/sdk/contracts)")
    ap.add_argument("--no-patch", action="store_true", help="Skip the definitions patch")
    ap.add_argument("--verbose", "-v", action="store_true", help="Echo DEBUG logs to stderr")
    args = ap.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else None, console_output=args.verbose)

    cfg = get_config().model_copy(
        update={
            "contracts_dir": args.root / "contracts",
            "out_dir": args.out or args.root / "sdk" / "contracts",
        }
    )
    try:
        report = run_build(cfg, patch=not args.no_patch)
    except ContractgenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"✨ Python code is generated successfully! ({len(report.codegen.contracts)} contract(s) in {cfg.out_dir})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
