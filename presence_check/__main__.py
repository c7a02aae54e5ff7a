"""Module entry point: python -m presence_check ..."""

from __future__ import annotations

from presence_check.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
