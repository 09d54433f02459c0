from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Hello server smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8080"))
    parser.add_argument("--timeout", type=float, default=20.0)
    parser.add_argument("--missing-path", default="/missing")
    parser.add_argument(
        "--version",
        default=None,
        dest="expected_version",
        help="Require this exact version in the greeting",
    )
    return parser.parse_args(argv)
