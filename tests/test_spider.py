from pathlib import Path

import pytest
from scrapy.exceptions import CloseSpider
from scrapy.http import HtmlResponse, Request, Response
from scrapy.utils.test import get_crawler
from scrapy.utils.url import url_is_from_spider

from congressSpider.config import DEFAULT_START_URLS
from congressSpider.items import ExtractedRecord, PageType
from congressSpider.spiders.congress_spider import CongressSpider

BILL_URL = "https://www.congress.gov/bill/118th-congress/house-bill/123"


def read_fixture(name: str) -> str:
    p = Path(__file__).parent / "fixtures" / name
    return p.read_text(encoding="utf-8")


def html_response(url: str, fixture: str) -> HtmlResponse:
    return HtmlResponse(
        url=url,
        body=read_fixture(fixture).encode("utf-8"),
        encoding="utf-8",
        request=Request(url),
    )


def test_defaults():
    spider = CongressSpider()
    assert spider.start_urls == list(DEFAULT_START_URLS)
    assert spider.config.max_requests == 200


def test_spider_arguments():
    spider = CongressSpider(
        start_urls="https://www.congress.gov/bill/hr1,https://www.congress.gov/bill/hr2",
        max_requests="10",
    )
    assert spider.start_urls == ["https://www.congress.gov/bill/hr1", "https://www.congress.gov/bill/hr2"]
    assert spider.config.max_requests == 10


def test_parse_yields_record_then_links():
    spider = CongressSpider()
    out = list(spider.parse(html_response(BILL_URL, "bill_page.html")))

    record = out[0]
    assert isinstance(record, ExtractedRecord)
    assert record.type is PageType.BILL
    assert record.title == "H.R. 123 Overview"

    requests = out[1:]
    assert all(isinstance(r, Request) for r in requests)
    assert sorted(r.url for r in requests) == [
        "https://www.congress.gov/bill/118th-congress/house-bill/124",
        "https://www.congress.gov/committees/house-ways-and-means",
        "https://www.congress.gov/member/jane-doe/D000001",
        "https://www.congress.gov/search?q=trade",
    ]
    assert spider.pages_processed == 1


def test_page_without_content_still_follows_links():
    spider = CongressSpider()
    html = '<html><body><h1></h1><a href="/bill/hr9">H.R.9</a></body></html>'
    resp = HtmlResponse(url="https://www.congress.gov/search", body=html.encode(), encoding="utf-8")
    out = list(spider.parse(resp))
    assert len(out) == 1
    assert isinstance(out[0], Request)
    assert out[0].url == "https://www.congress.gov/bill/hr9"


def test_non_text_response_is_skipped():
    spider = CongressSpider()
    resp = Response(url="https://www.congress.gov/bill/hr1/text.pdf", body=b"%PDF-1.7")
    assert list(spider.parse(resp)) == []
    assert spider.pages_processed == 0


def test_budget_reached_closes_spider_after_last_record():
    spider = CongressSpider(max_requests="1")
    got = []
    with pytest.raises(CloseSpider) as exc:
        for x in spider.parse(html_response(BILL_URL, "bill_page.html")):
            got.append(x)
    assert exc.value.reason == "max_requests_reached"
    assert len(got) == 1
    assert isinstance(got[0], ExtractedRecord)

    # responses already in flight are not processed any more
    assert list(spider.parse(html_response(BILL_URL, "bill_page.html"))) == []
    assert spider.pages_processed == 1


def test_settings_drive_patterns_and_budget():
    crawler = get_crawler(CongressSpider, settings_dict={
        "LINK_PATTERNS": ["**/member/**"],
        "MAX_REQUESTS_PER_CRAWL": 5,
    })
    spider = CongressSpider.from_crawler(crawler)
    assert spider.config.max_requests == 5

    out = list(spider.parse(html_response(BILL_URL, "bill_page.html")))
    urls = [r.url for r in out if isinstance(r, Request)]
    assert urls == ["https://www.congress.gov/member/jane-doe/D000001"]


def test_spider_argument_beats_setting():
    crawler = get_crawler(CongressSpider, settings_dict={"MAX_REQUESTS_PER_CRAWL": 5})
    spider = CongressSpider.from_crawler(crawler, max_requests="7")
    assert spider.config.max_requests == 7


def test_allowed_domains_follow_start_url_hosts():
    spider = CongressSpider(start_urls="https://www.congress.gov/search,https://Doe.House.gov/media,https://www.congress.gov/bill/hr1")
    assert spider.allowed_domains == ["doe.house.gov", "www.congress.gov"]
    assert CongressSpider().allowed_domains == ["www.congress.gov"]


def test_off_site_links_are_yielded_but_out_of_scope():
    spider = CongressSpider()
    html = (
        '<html><body><h1>Results</h1>'
        '<a href="https://random-blog.example/search/anything">elsewhere</a>'
        '<a href="/bill/hr9">H.R.9</a>'
        '</body></html>'
    )
    resp = HtmlResponse(url="https://www.congress.gov/search", body=html.encode(), encoding="utf-8")
    requests = [r for r in spider.parse(resp) if isinstance(r, Request)]

    in_scope = [r.url for r in requests if url_is_from_spider(r.url, spider)]
    assert in_scope == ["https://www.congress.gov/bill/hr9"]
    assert not url_is_from_spider("https://random-blog.example/search/anything", spider)
