import logging
import re
from typing import FrozenSet, Iterable, Optional, Pattern, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from congressSpider.items import FetchedPage

logger = logging.getLogger(__name__)

# Pages worth following: bills, members, press releases, committees, search
DEFAULT_LINK_PATTERNS = (
    "**/bill/**",
    "**/member/**",
    "**/press-release/**",
    "**/committees/**",
    "**/search**",
)

FOLLOW_SCHEMES = ("http", "https")


def glob_to_regex(glob: str) -> Pattern:
    """
    Translate a path glob into a case-insensitive regex (use with fullmatch).
      **   any number of path segments, including none (only as a whole segment;
           sharing a segment with other text it acts like *)
      *    anything inside one segment
      ?    one character inside one segment
    """
    out = []
    i, n = 0, len(glob)
    while i < n:
        if glob.startswith("**", i):
            own_segment = (i == 0 or glob[i - 1] == "/") and (i + 2 == n or glob[i + 2] == "/")
            i += 2
            if not own_segment:
                out.append("[^/]*")
            elif i < n:
                out.append("(?:.*/)?")
                i += 1
            else:
                out.append(".*")
        elif glob.startswith("/**", i) and i + 3 == n:
            out.append("(?:/.*)?")
            i += 3
        elif glob[i] == "*":
            out.append("[^/]*")
            i += 1
        elif glob[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(glob[i]))
            i += 1
    return re.compile("".join(out), re.IGNORECASE)


class LinkMatcher:
    """Globs compiled once at startup; read-only afterwards."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: Tuple[str, ...] = tuple(patterns)
        self._compiled = tuple(glob_to_regex(p) for p in self.patterns)

    def matches(self, url: str) -> bool:
        path = urlsplit(url).path or "/"
        return any(rx.fullmatch(path) for rx in self._compiled)

    def __repr__(self):
        return f"LinkMatcher({list(self.patterns)!r})"


def compile_patterns(patterns: Iterable[str] = DEFAULT_LINK_PATTERNS) -> LinkMatcher:
    return LinkMatcher(patterns)


def resolve_href(base_url: str, href: str) -> Optional[str]:
    """Absolute, fragment-free http(s) URL for `href`, or None if it can't be followed."""
    href = (href or "").strip()
    if not href or href.startswith("#"):
        return None
    try:
        parts = urlsplit(urljoin(base_url, href))
        parts.port  # raises on a garbage port
    except ValueError as err:
        logger.debug("Skipping malformed href %r on %s: %s", href, base_url, err)
        return None

    if parts.scheme not in FOLLOW_SCHEMES or not parts.netloc:
        return None
    return urlunsplit(parts._replace(netloc=parts.netloc.lower(), fragment=""))


def discover(page: FetchedPage, matcher: LinkMatcher) -> FrozenSet[str]:
    """In-scope outbound links of one page, deduplicated."""
    found = set()
    for href in page.document.css("a::attr(href)").getall():
        url = resolve_href(page.url, href)
        if url and matcher.matches(url):
            found.add(url)
    return frozenset(found)
