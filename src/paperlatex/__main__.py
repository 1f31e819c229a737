"""Allow ``python -m paperlatex``."""

from __future__ import annotations

from paperlatex.ui.cli import main


if __name__ == "__main__":
    main()
