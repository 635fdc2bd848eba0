# main.py
"""
Entry Point: snapintent

Purpose
-------
Run the screenshot pipeline from a source checkout without installing the console script.

Usage
-----
    python main.py --offline process data/sample/paris.png
    python main.py search "eiffel tower" --limit 3
    python main.py region
"""

from snapintent.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
