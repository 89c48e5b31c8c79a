"""Module entrypoint for ``python -m cherry_plan``."""

from __future__ import annotations

from . import main

if __name__ == "__main__":
    main()
