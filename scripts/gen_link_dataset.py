#!/usr/bin/env python3
"""Dataset generation script for link index performance checks.

Generates a synthetic CSV document shaped like a CMS export:
- Title / Slug text columns
- Content / Content 2 columns holding HTML fragments, a share of which carry
  ``<a href=...>`` anchors in mixed quoting styles
- Notes column with plain text

The output loads with ``csv-link-editor inspect`` or ``POST /api/upload``.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

ANCHOR_TEMPLATES = [
    '<a href="https://example.com/{slug}">{title}</a>',
    "<a class='more' href='https://example.com/{slug}?ref=csv'>more</a>",
    '<a target="_blank" href=/{slug}>{title}</a>',
]


def _html_cell(rng: np.random.Generator, slug: str, title: str, link_ratio: float) -> str:
    if rng.random() >= link_ratio:
        return f"<p>{title} has no links.</p>"
    n_links = int(rng.integers(1, 4))
    anchors = [
        ANCHOR_TEMPLATES[int(rng.integers(0, len(ANCHOR_TEMPLATES)))].format(slug=slug, title=title)
        for _ in range(n_links)
    ]
    return "<p>" + ", ".join(anchors) + "</p>"


def generate_link_document(rows: int, link_ratio: float = 0.3, seed: int = 42) -> pd.DataFrame:
    """Build the synthetic document.

    Args:
        rows: Number of data rows
        link_ratio: Probability that a Content cell contains at least one link;
            Content 2 uses half of it
        seed: Random seed for reproducible data

    Returns:
        DataFrame with string columns only
    """
    rng = np.random.default_rng(seed)
    titles = [f"Page {i + 1}" for i in range(rows)]
    slugs = [f"page-{i + 1}" for i in range(rows)]
    return pd.DataFrame(
        {
            "Title": titles,
            "Slug": slugs,
            "Content": [_html_cell(rng, s, t, link_ratio) for s, t in zip(slugs, titles)],
            "Content 2": [_html_cell(rng, s, t, link_ratio / 2) for s, t in zip(slugs, titles)],
            "Notes": rng.choice(["", "draft", "review", "published"], rows).tolist(),
        }
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic CSV document with HTML link columns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 50k rows, 30%% of Content cells with links
  %(prog)s data/links.csv

  # Larger, denser document
  %(prog)s data/dense.csv --rows 200000 --link-ratio 0.8 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output CSV file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument(
        "--link-ratio",
        type=float,
        default=0.3,
        help="Share of Content cells with links, 0..1 (default: 0.3)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.link_ratio <= 1:
        print("Error: --link-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    df = generate_link_document(args.rows, args.link_ratio, args.seed)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False, lineterminator="\n")

    print(f"Created CSV file: {args.output}")
    print(f"  Rows: {args.rows:,}")
    print(f"  Columns: {', '.join(df.columns)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
