"""
Record extraction for legislative pages.

Each field is filled by an ordered tuple of probes. A probe looks at the parsed
document and returns a string or None; the first non-empty (stripped) answer
wins. Keeping the probes separate makes every fallback step testable alone.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence
from urllib.parse import urlsplit

from parsel import Selector

from congressSpider.items import ExtractedRecord, FetchedPage, PageType

logger = logging.getLogger(__name__)

Probe = Callable[[Selector], Optional[str]]

# congress.gov result lists, member sites and press pages
DATE_TEXT_CSS = "span.date, .result-item .date, .display-date, .publication-date"

# Fixed layouts only, no natural-language parsing
DATE_FORMATS = ("%m/%d/%Y", "%B %d, %Y", "%b %d, %Y")


def _text(nodes) -> Optional[str]:
    """All text of the first node in `nodes` (descendants included)."""
    if not nodes:
        return None
    return "".join(nodes[0].css("::text").getall())


def _meta(doc: Selector, attr: str, value: str) -> Optional[str]:
    return doc.css(f'meta[{attr}="{value}"]::attr(content)').get()


def first_match(probes: Sequence[Probe], doc: Selector) -> str:
    for probe in probes:
        value = probe(doc)
        if value and value.strip():
            return value.strip()
    return ""


# ---------- title ----------

def probe_heading(doc):
    return _text(doc.css("h1"))


def probe_title_tag(doc):
    return _text(doc.css("title"))


TITLE_PROBES = (probe_heading, probe_title_tag)


# ---------- date ----------

def probe_time_element(doc):
    times = doc.css("time")
    return times[0].attrib.get("datetime") if times else None


def probe_dc_date(doc):
    return _meta(doc, "name", "DC.date")


def probe_published_time(doc):
    return _meta(doc, "property", "article:published_time")


def probe_date_text(doc):
    return _text(doc.css(DATE_TEXT_CSS))


DATE_PROBES = (probe_time_element, probe_dc_date, probe_published_time, probe_date_text)


def normalize_date(raw: str) -> str:
    """
    '03/01/2024' / 'March 1, 2024' -> '2024-03-01'.
    ISO values and anything unrecognised come back as written.
    """
    value = " ".join(raw.split())
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    return raw


# ---------- summary ----------

def probe_description(doc):
    return _meta(doc, "name", "description")


def probe_og_description(doc):
    return _meta(doc, "property", "og:description")


def probe_first_paragraph(doc):
    return _text(doc.css("p"))


SUMMARY_PROBES = (probe_description, probe_og_description, probe_first_paragraph)


# ---------- type ----------

def classify(url: str, doc: Selector) -> PageType:
    """URL rules first: og:type is usually just 'website' on this site."""
    path  = urlsplit(url).path
    lower = url.lower()

    if "/bill/" in path or "/bills/" in path:
        return PageType.BILL
    if "press" in lower:
        return PageType.PRESS_RELEASE
    if "disclosure" in lower or "financial" in lower:
        return PageType.DISCLOSURE

    og_type = (_meta(doc, "property", "og:type") or "").strip().lower()
    if not og_type:
        return PageType.UNKNOWN
    try:
        return PageType(og_type)
    except ValueError:
        return PageType.OTHER


# ---------- record ----------

def extract(page: FetchedPage) -> Optional[ExtractedRecord]:
    """Build the record for one page, or None when there is nothing worth saving."""
    doc = page.document
    try:
        title     = first_match(TITLE_PROBES, doc)
        date      = normalize_date(first_match(DATE_PROBES, doc))
        page_type = classify(page.url, doc)
        summary   = first_match(SUMMARY_PROBES, doc)
    except Exception as err:
        logger.warning("Extraction error on %s: %s", page.url, err)
        return None

    if not title and not summary:
        logger.debug("No meaningful title/summary found on %s", page.url)
        return None

    return ExtractedRecord(
        title   = title,
        date    = date,
        type    = page_type,
        summary = summary,
        url     = page.url,
    )
