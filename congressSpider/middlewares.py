# Define here the models for your downloader middleware
#
# See documentation in:
# https://docs.scrapy.org/en/latest/topics/downloader-middleware.html

from itertools import cycle

from scrapy.exceptions import NotConfigured


class RotatingProxyMiddleware:
    """
    Hands out PROXY_URLS round-robin via request.meta['proxy'].
    Requests that already name a proxy keep it.
    """

    def __init__(self, proxy_urls):
        if not proxy_urls:
            raise NotConfigured("PROXY_URLS is empty")
        self.proxy_urls = list(proxy_urls)
        self._next = cycle(self.proxy_urls)

    @classmethod
    def from_crawler(cls, crawler):
        return cls(crawler.settings.getlist("PROXY_URLS"))

    def process_request(self, request, spider):
        if "proxy" not in request.meta:
            request.meta["proxy"] = next(self._next)
        return None
