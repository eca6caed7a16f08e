"""`python -m jsonld_cli` entry point."""

from __future__ import annotations

import sys

from jsonld_cli.cli.main import run


def force_utf8_streams() -> None:
    """Windows consoles default to cp1252; JSON-LD output is UTF-8."""

    if sys.platform != "win32":
        return
    for stream in (sys.stdout, sys.stderr):
        reconfigure = getattr(stream, "reconfigure", None)
        if reconfigure is not None:
            reconfigure(encoding="utf-8")


def main() -> None:
    force_utf8_streams()
    run()


if __name__ == "__main__":
    main()
