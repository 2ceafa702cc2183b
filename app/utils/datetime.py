"""
DateTime Utility Module
UTC 타임존 처리를 위한 유틸리티 함수들

DB(SQLite 등)에서 naive datetime이 돌아올 수 있으므로
비교 전에는 항상 ensure_utc()를 거칩니다.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """
    UTC 타임존이 포함된 현재 시간을 반환

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    datetime을 UTC 타임존으로 변환
    naive datetime인 경우 UTC로 간주하여 타임존 추가
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    elif dt.tzinfo != timezone.utc:
        return dt.astimezone(timezone.utc)
    return dt


def is_past(dt: datetime, now: Optional[datetime] = None) -> bool:
    """dt가 now(기본: 현재 UTC)보다 이전이면 True"""
    return ensure_utc(dt) < (now or utc_now())


def add_days(dt: datetime, days: int) -> datetime:
    """datetime에 일수를 더함 (UTC 유지)"""
    return ensure_utc(dt) + timedelta(days=days)


def add_hours(dt: datetime, hours: int) -> datetime:
    """datetime에 시간을 더함 (UTC 유지)"""
    return ensure_utc(dt) + timedelta(hours=hours)


def seconds_until_next_hour_of_day(hour: int, now: Optional[datetime] = None) -> float:
    """
    다음 `hour`시 정각(UTC)까지 남은 초
    정확히 그 시각이면 하루 뒤를 반환
    """
    now = ensure_utc(now or utc_now())
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


__all__ = [
    'utc_now',
    'ensure_utc',
    'is_past',
    'add_days',
    'add_hours',
    'seconds_until_next_hour_of_day',
]
