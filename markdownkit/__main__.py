"""Module entrypoint for running markdownkit as ``python -m markdownkit``."""

from __future__ import annotations

from markdownkit.cli import main


if __name__ == "__main__":
    main()
