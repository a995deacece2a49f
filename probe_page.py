#!/usr/bin/env python3
"""
probe_page.py
─────────────
Fetches congress.gov pages and prints what the spider would make of them:
the extracted record and the in-scope links it would follow.

Usage
-----
    python probe_page.py URL [URL …]

Example
-------
    python probe_page.py \
        https://www.congress.gov/bill/118th-congress/house-bill/123 \
        https://www.congress.gov/member/nancy-pelosi/P000197
"""

import sys
import textwrap

import requests

from congressSpider.extract import extract
from congressSpider.items import FetchedPage
from congressSpider.links import compile_patterns, discover

HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; CongressProbe/1.0)"
}


def fetch_page(url: str) -> FetchedPage:
    """GET the URL (following redirects) and wrap it as a FetchedPage."""
    resp = requests.get(url, headers=HEADERS, timeout=30)
    resp.raise_for_status()
    return FetchedPage.from_html(resp.url, resp.text)


def main(urls):
    matcher = compile_patterns()
    for url in urls:
        print("=" * 80)
        print(f"URL: {url}")
        try:
            page = fetch_page(url)
        except requests.RequestException as err:
            print(f"✗ Failed: {err}")
            continue

        record = extract(page)
        if record is None:
            print("✗ No record (no title or summary)")
        else:
            print(f"✓ {record.type.value}: {record.title}")
            print(f"  date:    {record.date or '-'}")
            print("  summary: " + textwrap.shorten(record.summary, width=200, placeholder=" …"))

        links = sorted(discover(page, matcher))
        print(f"Links in scope: {len(links)}")
        for link in links[:20]:
            print(f"  {link}")


if __name__ == "__main__":
    if len(sys.argv) == 1:
        print(__doc__)
        sys.exit(0)

    main(sys.argv[1:])
