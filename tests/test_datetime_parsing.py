from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from coursemail.utils.datetime_parsing import ensure_utc, rebuild_from_components, resolve_timezone


def test_resolve_timezone_falls_back_to_utc():
    assert resolve_timezone("Europe/Paris") == ZoneInfo("Europe/Paris")
    assert resolve_timezone("Mars/Olympus") == ZoneInfo("UTC")
    assert resolve_timezone(None) == ZoneInfo("UTC")


def test_ensure_utc_attaches_utc_to_naive_values():
    naive = datetime(2026, 5, 1, 9, 0)

    assert ensure_utc(naive) == datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)
    assert ensure_utc(None) is None


def test_rebuild_from_components_drops_microseconds():
    value = datetime(2026, 5, 1, 9, 15, 30, 500000, tzinfo=timezone.utc)

    rebuilt = rebuild_from_components(value, ZoneInfo("Europe/Paris"))

    assert rebuilt.hour == 11
    assert rebuilt.microsecond == 0
    assert rebuilt == value.replace(microsecond=0)
