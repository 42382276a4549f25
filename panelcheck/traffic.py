"""Panel Check - Apache domlog traffic tables"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from .models import AccessHit, FrequencyTable, LogWindow
from .parsers import domain_from_log_name, parse_access_line
from .patterns import (
    ACCESS_LOG_DATE_FORMAT, BOT_KEYWORDS, SKIPPED_DOMLOG_SUFFIXES,
    TOP_DOMAINS, TOP_IPS, TOP_URIS,
)

log = logging.getLogger(__name__)


def date_token(now: Optional[datetime] = None, date_format: str = ACCESS_LOG_DATE_FORMAT) -> str:
    """Substring that marks a line as logged on ``now``'s calendar day"""
    now = now or datetime.now()
    return now.strftime(date_format) + ':'


def domlog_files(domlogs: Path) -> List[Path]:
    """Access logs at the top of domlogs and in per-user subdirectories"""
    candidates = sorted(domlogs.glob('*')) + sorted(domlogs.glob('*/*'))
    return [
        p for p in candidates
        if p.is_file() and not p.name.endswith(SKIPPED_DOMLOG_SUFFIXES)
    ]


def _read_matching(path: Path, token: str) -> Iterator[AccessHit]:
    domain = domain_from_log_name(path.name)
    try:
        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            for line in f:
                if token not in line:
                    continue
                hit = parse_access_line(line, domain)
                # match on the line's own timestamp, not a date inside the URI or referrer
                if hit and hit.timestamp and hit.timestamp.startswith(token):
                    yield hit
    except OSError as e:
        log.warning("Skipping unreadable domlog %s: %s", path, e)


def load_window(domlogs: Path, token: str) -> LogWindow:
    hits = []
    for path in domlog_files(domlogs):
        hits.extend(_read_matching(path, token))
    log.debug("Read %d hits for %s from %s", len(hits), token, domlogs)
    return LogWindow(date_token=token, hits=tuple(hits))


def top_ips(window: LogWindow, limit: int = TOP_IPS) -> FrequencyTable:
    return FrequencyTable.from_keys((h.ip for h in window), limit, label='IP Address')


def top_domains_by_method(window: LogWindow, method: str, limit: int = TOP_DOMAINS) -> FrequencyTable:
    return FrequencyTable.from_keys(
        (h.domain for h in window if h.method == method), limit, label='Domain'
    )


def top_post_uris(window: LogWindow, limit: int = TOP_URIS) -> FrequencyTable:
    return FrequencyTable.from_keys(
        (h.uri for h in window if h.method == 'POST' and h.uri), limit, label='URI'
    )


def is_bot(hit: AccessHit) -> bool:
    raw = hit.raw.lower()
    return any(keyword in raw for keyword in BOT_KEYWORDS)


def top_bot_domains(window: LogWindow, limit: int = TOP_DOMAINS) -> FrequencyTable:
    return FrequencyTable.from_keys(
        (h.domain for h in window if is_bot(h)), limit, label='Domain'
    )
