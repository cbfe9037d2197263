"""Module entrypoint for running texvoice as ``python -m texvoice``."""

from __future__ import annotations

from texvoice.cli import main


if __name__ == "__main__":
    main()
