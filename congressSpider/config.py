import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

DEFAULT_START_URLS = (
    "https://www.congress.gov/search?q=%7B%22search%22:%5B%22trade%22%5D%7D",
)
DEFAULT_MAX_REQUESTS = 200


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RunConfig:
    start_urls:   Tuple[str, ...]
    max_requests: int


def _parse_start_urls(raw) -> List[str]:
    """Accepts 'a,b', ['a', 'b'] or [{'url': 'a'}, ...]."""
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        raise ConfigError(f"startUrls must be a list, got {type(raw).__name__}")

    urls = []
    for entry in raw:
        if isinstance(entry, dict):
            entry = entry.get("url", "")
        if not isinstance(entry, str):
            raise ConfigError(f"Unsupported start URL entry: {entry!r}")
        entry = entry.strip()
        if not entry:
            continue
        if not entry.startswith(("http://", "https://")):
            raise ConfigError(f"Start URL must be absolute http(s): {entry!r}")
        urls.append(entry)
    return urls


def parse_max_requests(raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"maxRequestsPerCrawl must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigError(f"maxRequestsPerCrawl must be >= 1, got {value}")
    return value


def load_run_config(input_path: Optional[Union[str, Path]] = None,
                    start_urls=None,
                    max_requests=None,
                    default_max_requests: int = DEFAULT_MAX_REQUESTS) -> RunConfig:
    """
    Resolve the run input once, before crawling starts.

    Precedence: explicit arguments > JSON input file > built-in defaults.
    The input file looks like {"startUrls": [...], "maxRequestsPerCrawl": 200}.
    """
    data = {}
    if input_path:
        path = Path(input_path).expanduser()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as err:
            raise ConfigError(f"Cannot read input file {path}: {err}") from err
        except json.JSONDecodeError as err:
            raise ConfigError(f"Input file {path} is not valid JSON: {err}") from err
        if not isinstance(data, dict):
            raise ConfigError(f"Input file {path} must hold a JSON object")

    raw_urls = start_urls if start_urls is not None else data.get("startUrls")
    urls = _parse_start_urls(raw_urls) if raw_urls is not None else []

    raw_max = max_requests if max_requests is not None else data.get("maxRequestsPerCrawl")
    limit = parse_max_requests(raw_max) if raw_max is not None else default_max_requests

    return RunConfig(
        start_urls   = tuple(urls) or DEFAULT_START_URLS,
        max_requests = limit,
    )
