#!/usr/bin/env python3
"""
Build docset artifacts from documentation pages.

This script:
1. Reads the pages (.md / .mdx) under the source directory
2. Parses front matter and validates ids and permalinks
3. Links prev/next navigation into chains
4. Builds the redirect table
5. Writes documents.json, navigation.json, redirects.json and page bodies

Usage:
    python Ingress/build_docs.py
    python Ingress/build_docs.py --source docs/
    python Ingress/build_docs.py --check
"""

import argparse
import logging
import sys
from pathlib import Path

from docset import config
from docset.builder import DocsetBuilder, build_docset
from docset.errors import ValidationFailed
from docset.store import read_sources


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Build docset artifacts from documentation pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Build from the default source directory
    python Ingress/build_docs.py

    # Build from a specific directory
    python Ingress/build_docs.py --source docs/

    # Only validate, write nothing
    python Ingress/build_docs.py --check

    # Require every page in one prev/next chain
    python Ingress/build_docs.py --single-chain
        """
    )

    parser.add_argument(
        "--source",
        type=Path,
        default=config.SOURCE_DIR,
        help=f"Directory holding the pages (default: {config.SOURCE_DIR})"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.OUTPUT_DIR,
        help=f"Output directory for artifacts (default: {config.OUTPUT_DIR})"
    )

    parser.add_argument(
        "--pattern",
        action="append",
        dest="patterns",
        help="Glob pattern for page files, repeatable (default: %s)" % ", ".join(config.SOURCE_PATTERNS)
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=config.PARSE_WORKERS,
        help=f"Parser threads (default: {config.PARSE_WORKERS})"
    )

    parser.add_argument(
        "--single-chain",
        action="store_true",
        default=config.SINGLE_CHAIN,
        help="Fail unless all pages form one navigation chain"
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate only, do not write artifacts"
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Remove existing artifacts before building"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed output"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    patterns = tuple(args.patterns) if args.patterns else config.SOURCE_PATTERNS

    print("\n" + "=" * 70)
    print("Docset Builder")
    print("=" * 70)
    print(f"\nSource: {args.source}")
    if not args.check:
        print(f"Output: {args.output_dir}")
    print("=" * 70)

    try:
        if args.check:
            docset = build_docset(read_sources(args.source, patterns), args.workers, args.single_chain)
            stats = {
                "documents_count": len(docset.store),
                "chains_count": len(docset.navigation.chains),
                "redirects_count": len(docset.redirects),
            }
        else:
            builder = DocsetBuilder(args.output_dir)
            stats = builder.build_from_directory(
                args.source,
                patterns=patterns,
                workers=args.workers,
                single_chain=args.single_chain,
                clean_existing=args.reset,
            )

    except FileNotFoundError as e:
        print(f"\n✗ Error: {e}")
        return 1

    except ValidationFailed as e:
        print(f"\n✗ Validation failed with {len(e.issues)} issue(s):")
        for issue in e.issues:
            print(f"  • {issue}")
        return 1

    print("\n" + "=" * 70)
    print("DOCSET CHECK COMPLETE" if args.check else "DOCSET BUILD COMPLETE")
    print("=" * 70)
    print(f"  ✓ Documents: {stats['documents_count']}")
    print(f"  ✓ Navigation chains: {stats['chains_count']}")
    print(f"  ✓ Redirects: {stats['redirects_count']}")

    if not args.check:
        print(f"\nDocset location: {args.output_dir}")
        print(f"  • documents.json   - Document index")
        print(f"  • navigation.json  - Navigation chains")
        print(f"  • redirects.json   - Redirect table")
        print(f"  • documents/       - Page bodies ({stats['documents_count']} files)")

    print("=" * 70 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
