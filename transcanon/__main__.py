"""Module entrypoint for running transcanon as ``python -m transcanon``."""

from __future__ import annotations

from transcanon.cli import main


if __name__ == "__main__":
    main()
