# Scrapy settings for congressSpider project
#
# For simplicity, this file contains only settings considered important or
# commonly used. You can find more settings consulting the documentation:
#
#     https://docs.scrapy.org/en/latest/topics/settings.html
#     https://docs.scrapy.org/en/latest/topics/downloader-middleware.html
#     https://docs.scrapy.org/en/latest/topics/item-pipeline.html

import os
from pathlib import Path

from congressSpider.config import DEFAULT_MAX_REQUESTS, parse_max_requests
from congressSpider.links import DEFAULT_LINK_PATTERNS

PROJECT_ROOT = Path(__file__).resolve().parent

BOT_NAME = "congressSpider"

SPIDER_MODULES = ["congressSpider.spiders"]
NEWSPIDER_MODULE = "congressSpider.spiders"

USER_AGENT = "Mozilla/5.0 (compatible; CongressBot/1.0)"

# Obey robots.txt rules
ROBOTSTXT_OBEY = True

# Crawl-engine limits
CONCURRENT_REQUESTS = 16
CONCURRENT_REQUESTS_PER_DOMAIN = 8
DOWNLOAD_DELAY = 0.5
RETRY_ENABLED = True
RETRY_TIMES = 3

AUTOTHROTTLE_ENABLED = True
AUTOTHROTTLE_START_DELAY = 1.0
AUTOTHROTTLE_MAX_DELAY = 30.0

LOG_LEVEL = os.environ.get("CONGRESS_LOG_LEVEL", "INFO")

DOWNLOADER_MIDDLEWARES = {
    "congressSpider.middlewares.RotatingProxyMiddleware": 350,
}

ITEM_PIPELINES = {
    "congressSpider.pipelines.RecordDatasetPipeline": 300,
    "congressSpider.pipelines.SQLitePipeline": 400,
}

# ---- project settings ----

LINK_PATTERNS = list(DEFAULT_LINK_PATTERNS)

MAX_REQUESTS_PER_CRAWL = parse_max_requests(os.environ.get("CONGRESS_MAX_REQUESTS", DEFAULT_MAX_REQUESTS))

DATASET_DIR = os.environ.get("CONGRESS_DATASET_DIR", str(PROJECT_ROOT / "storage" / "datasets"))

# empty string disables the SQLite copy
SQLITE_DB = os.environ.get("CONGRESS_SQLITE_DB", str(PROJECT_ROOT / "records.db"))

PROXY_URLS = [p.strip() for p in os.environ.get("CONGRESS_PROXY_URLS", "").split(",") if p.strip()]

# Set settings whose default value is deprecated to a future-proof value
TWISTED_REACTOR = "twisted.internet.asyncioreactor.AsyncioSelectorReactor"
FEED_EXPORT_ENCODING = "utf-8"
