from __future__ import annotations

import sys
from typing import Optional, Sequence

from .cli import cli


def _use_utf8_stdio() -> None:
    # Table names and cell values may hold any text; never fail on output.
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is None:
            continue
        try:
            reconfigure(encoding="utf-8", errors="backslashreplace")
        except OSError:
            continue


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point for ``sqlitedit`` and ``python -m sqlitedit``."""
    _use_utf8_stdio()
    cli.main(args=list(argv) if argv is not None else None, prog_name="sqlitedit")


if __name__ == "__main__":
    main()
