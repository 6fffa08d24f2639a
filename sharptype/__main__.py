"""Module entrypoint for `python -m sharptype`."""

from __future__ import annotations

from .app import main_entry


def main() -> None:
    """Run the console tutor."""
    main_entry()


if __name__ == "__main__":  # pragma: no cover
    main()
