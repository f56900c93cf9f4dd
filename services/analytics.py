import hashlib
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from schemas.analytics import DailyStats

VALID_EVENT_TYPES = ("view", "click", "expand")
HEADER_LIMIT = 500


def client_ip(forwarded_for: Optional[str], fallback: Optional[str]) -> str:
    """Первый адрес из X-Forwarded-For, иначе адрес соединения."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return fallback or "unknown"


def hash_ip(ip: str, salt: str) -> str:
    """IP не храним: только обрезанный sha256(ip + salt)."""
    return hashlib.sha256((ip + salt).encode("utf-8")).hexdigest()[:16]


def truncate_header(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value[:HEADER_LIMIT]


def daily_breakdown(events: Iterable[Tuple[str, datetime]]) -> Dict[str, DailyStats]:
    stats: Dict[str, DailyStats] = {}
    for event_type, created_at in events:
        day = created_at.date().isoformat()
        bucket = stats.setdefault(day, DailyStats())
        if event_type == "view":
            bucket.views += 1
        elif event_type == "click":
            bucket.clicks += 1
    return stats
