"""Development entry point (no install needed).

Usage: `python main.py check path/to/settings.py`

The packages live under `src/`, so without `pip install -e .` the
interpreter cannot find `cli` or `core`; this script puts `src/` on the path
and hands over to the `simple-conf` application.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    # Windows terminals default to cp1252; Rich tables need utf-8.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
