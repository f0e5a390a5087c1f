"""Module entrypoint for running Orgbooks as ``python -m orgbooks``."""

from __future__ import annotations

from orgbooks.cli import main


if __name__ == "__main__":
    main()
