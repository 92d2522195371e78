"""
examples/canonicalize_purls.py

A script to canonicalize Package URLs (purls).

This script takes purls as command-line arguments (or one per line from a file),
parses each one and prints its canonical form. Invalid purls are reported with
the reason they were rejected.

Prerequisites:
- Ensure the 'purler' package is installed.

Usage:
python examples/canonicalize_purls.py <PURL> [<PURL> ...]
python examples/canonicalize_purls.py --file purls.txt --policy pop
"""
import argparse
import logging
import sys

from purler import PurlError, parse
from purler.config import configure_logging

logger = logging.getLogger(__name__)


def read_purls(args):
    """Yields purl strings from the arguments and the optional input file."""
    yield from args.purls
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    yield line


def main():
    """
    Main function to canonicalize purls.
    """
    parser = argparse.ArgumentParser(description="Print the canonical form of Package URLs.")
    parser.add_argument("purls", nargs="*", help="Package URLs (purls) to canonicalize.")
    parser.add_argument("--file", help="A file with one purl per line.")
    parser.add_argument("--policy", choices=["drop", "pop"], help="How '..' subpath segments are handled.")
    parser.add_argument("--url-component", action="store_true", help="Print the purl encoded for a URL path.")
    parser.add_argument("--debug", action="store_true", help="Log normalization steps.")
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.debug else None)

    failures = 0
    for purl_str in read_purls(args):
        try:
            purl = parse(purl_str, subpath_parent_policy=args.policy)
        except PurlError as e:
            failures += 1
            logger.error(f"{purl_str}: {e}")
            continue
        print(purl.to_url_component() if args.url_component else purl.to_string())

    if failures:
        logger.warning(f"{failures} purl(s) could not be parsed.")
        sys.exit(1)


if __name__ == "__main__":
    main()
