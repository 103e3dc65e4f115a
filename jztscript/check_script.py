#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from jztscript.script import Script, ScriptDiagnostic


def check_file(path: Path) -> Optional[ScriptDiagnostic]:
    """Parse ``path`` as one script and return its diagnostic, if any."""
    diagnostics: List[ScriptDiagnostic] = []
    Script(path.stem, path.read_text(encoding="utf-8"), on_error=diagnostics.append)
    return diagnostics[0] if diagnostics else None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jztscript-check",
        description="Lex and parse JZTScript files, reporting the first error in each.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Script files to check. Each file is parsed as one script.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print failing files.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    failed = 0
    for filename in args.files:
        path = Path(filename)
        try:
            diagnostic = check_file(path)
        except OSError as exc:
            print(f"{filename}: cannot read file ({exc.strerror or exc})", file=sys.stderr)
            failed += 1
            continue
        if diagnostic is not None:
            print(f"{filename}:{diagnostic.line_number}: {diagnostic.message}", file=sys.stderr)
            print(f"    {diagnostic.line_text.strip()}", file=sys.stderr)
            failed += 1
        elif not args.quiet:
            print(f"{filename}: OK")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
