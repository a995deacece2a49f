import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from itemadapter import ItemAdapter
from scrapy.exceptions import DropItem

from congressSpider.items import ExtractedRecord


def _as_row(item) -> dict:
    if isinstance(item, ExtractedRecord):
        return item.to_dict()
    return ItemAdapter(item).asdict()


def _run_id(spider) -> str:
    """One id per crawl; both sinks tag rows with it."""
    run_id = getattr(spider, "run_id", None)
    if not run_id:
        run_id = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        spider.run_id = run_id
    return run_id


class RecordDatasetPipeline:
    """
    Appends every record as one JSON line to DATASET_DIR/<run_id>.jsonl.
    Rejects items with neither title nor summary.
    """

    def __init__(self, dataset_dir):
        self.dataset_dir = Path(dataset_dir)
        self.path = None
        self.file = None

    @classmethod
    def from_crawler(cls, crawler):
        return cls(crawler.settings.get("DATASET_DIR"))

    def open_spider(self, spider):
        self.dataset_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.dataset_dir / f"{_run_id(spider)}.jsonl"
        self.file = self.path.open("a", encoding="utf-8")

    def close_spider(self, spider):
        if self.file:
            self.file.close()
            spider.logger.info(f"Dataset written to {self.path}")

    def process_item(self, item, spider):
        row = _as_row(item)
        if not row.get("title") and not row.get("summary"):
            raise DropItem(f"No title or summary for {row.get('url')}")

        self.file.write(json.dumps(row, ensure_ascii=False) + "\n")
        self.file.flush()
        return item


class SQLitePipeline:
    """
    Append-only copy of the records in SQLite (one row per record, tagged
    with the run id). Disabled when SQLITE_DB is empty.
    """

    def __init__(self, db_file):
        self.db_file = db_file

    @classmethod
    def from_crawler(cls, crawler):
        return cls(crawler.settings.get("SQLITE_DB"))

    def open_spider(self, spider):
        self.run_id = _run_id(spider)
        self.conn = None
        if not self.db_file:
            return
        self.conn = sqlite3.connect(self.db_file)
        self.cur  = self.conn.cursor()
        self.cur.execute(
            """CREATE TABLE IF NOT EXISTS records (
                   id      INTEGER PRIMARY KEY AUTOINCREMENT,
                   run_id  TEXT,
                   title   TEXT,
                   date    TEXT,
                   type    TEXT,
                   summary TEXT,
                   url     TEXT
               )"""
        )
        self.conn.commit()

    def close_spider(self, spider):
        if self.conn:
            self.conn.commit()
            self.conn.close()

    def process_item(self, item, spider):
        if not self.conn:
            return item
        row = _as_row(item)
        self.cur.execute(
            "INSERT INTO records (run_id, title, date, type, summary, url) VALUES (?, ?, ?, ?, ?, ?)",
            (self.run_id, row["title"], row["date"], row["type"], row["summary"], row["url"]),
        )
        self.conn.commit()
        return item
