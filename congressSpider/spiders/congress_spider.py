from urllib.parse import urlsplit

import scrapy
from scrapy.exceptions import CloseSpider
from scrapy.http import TextResponse

from congressSpider.config import DEFAULT_MAX_REQUESTS, load_run_config
from congressSpider.extract import extract
from congressSpider.items import FetchedPage
from congressSpider.links import DEFAULT_LINK_PATTERNS, compile_patterns, discover


class CongressSpider(scrapy.Spider):
    """
    Walks congress.gov from the seed URLs: every page yields at most one
    record and its in-scope links.

    Spider arguments:
        -a input_file=INPUT.json       {"startUrls": [...], "maxRequestsPerCrawl": n}
        -a start_urls=URL[,URL...]
        -a max_requests=N
    """

    name = "congress"

    def __init__(self, input_file=None, start_urls=None, max_requests=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._input_path   = input_file
        self._start_urls   = start_urls
        self._max_requests = max_requests
        self.pages_processed = 0
        self.configure()

    @classmethod
    def from_crawler(cls, crawler, *args, **kwargs):
        spider = super().from_crawler(crawler, *args, **kwargs)
        spider.configure(crawler.settings)
        return spider

    def configure(self, settings=None):
        """Load the run input and compile the link globs (once per crawl)."""
        default_max = DEFAULT_MAX_REQUESTS
        patterns    = DEFAULT_LINK_PATTERNS
        if settings is not None:
            default_max = settings.getint("MAX_REQUESTS_PER_CRAWL", DEFAULT_MAX_REQUESTS)
            patterns    = settings.getlist("LINK_PATTERNS") or DEFAULT_LINK_PATTERNS

        self.config = load_run_config(
            input_path           = self._input_path,
            start_urls           = self._start_urls,
            max_requests         = self._max_requests,
            default_max_requests = default_max,
        )
        self.start_urls = list(self.config.start_urls)
        self.matcher    = compile_patterns(patterns)
        # same-host scope: OffsiteMiddleware drops links to any other host
        self.allowed_domains = sorted({
            urlsplit(u).hostname for u in self.start_urls if urlsplit(u).hostname
        })

    def parse(self, response):
        if not isinstance(response, TextResponse):
            self.logger.debug(f"Skipping non-text response {response.url}")
            return
        if self.pages_processed >= self.config.max_requests:
            return

        self.pages_processed += 1
        self.logger.info(f"Processing {response.url}")

        page   = FetchedPage.from_response(response)
        record = extract(page)
        if record is not None:
            self.logger.info(f"Saved item {record.title!r} from {record.url}")
            yield record

        if self.pages_processed >= self.config.max_requests:
            raise CloseSpider("max_requests_reached")

        for url in sorted(discover(page, self.matcher)):
            yield response.follow(url, callback=self.parse)

    def closed(self, reason):
        """Called when the spider is closed."""
        self.logger.info(f"Spider closed cleanly: {reason} ({self.pages_processed} pages processed)")
