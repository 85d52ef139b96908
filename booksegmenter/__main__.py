"""Module entrypoint for running booksegmenter as ``python -m booksegmenter``."""

from __future__ import annotations

from booksegmenter.cli import main


if __name__ == "__main__":
    main()
