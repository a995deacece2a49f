# Define here the models for your scraped items
#
# See documentation in:
# https://docs.scrapy.org/en/latest/topics/items.html

from dataclasses import dataclass
from enum import Enum

from parsel import Selector


class PageType(str, Enum):
    BILL          = "bill"
    PRESS_RELEASE = "press_release"
    DISCLOSURE    = "disclosure"
    OTHER         = "other"
    UNKNOWN       = "unknown"


@dataclass(frozen=True)
class FetchedPage:
    """One fetched document: final URL (after redirects) + parsed markup."""

    url: str
    document: Selector

    @classmethod
    def from_response(cls, response):
        return cls(url=response.url, document=response.selector)

    @classmethod
    def from_html(cls, url: str, html: str):
        return cls(url=url, document=Selector(text=html))


@dataclass(frozen=True)
class ExtractedRecord:
    title:   str
    date:    str            # ISO-8601 when parseable, else raw text, else ""
    type:    PageType
    summary: str
    url:     str

    def to_dict(self) -> dict:
        return {
            "title":   self.title,
            "date":    self.date,
            "type":    self.type.value,
            "summary": self.summary,
            "url":     self.url,
        }
