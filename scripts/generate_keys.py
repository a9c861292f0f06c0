#!/usr/bin/env python3
"""
Generate the RSA key pair the API signs tokens with.

Usage:
    python scripts/generate_keys.py [--private private.key] [--public public.key] [--force]
"""

from __future__ import annotations

import argparse
import logging
import sys

from postedit.keys import write_key_pair
from postedit.settings import JWT_PRIVATE_KEY_PATH, JWT_PUBLIC_KEY_PATH


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate RS256 signing keys")
    parser.add_argument("--private", default=JWT_PRIVATE_KEY_PATH, help="Private key output path")
    parser.add_argument("--public", default=JWT_PUBLIC_KEY_PATH, help="Public key output path")
    parser.add_argument("--force", action="store_true", help="Overwrite existing keys")
    args = parser.parse_args()

    logging.basicConfig(level="INFO")
    try:
        write_key_pair(args.private, args.public, overwrite=args.force)
    except FileExistsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
