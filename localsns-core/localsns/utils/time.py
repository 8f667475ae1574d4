from datetime import datetime, timezone

TIMESTAMP_FORMAT_MICROS = "%Y-%m-%dT%H:%M:%S.%fZ"


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def timestamp(time: datetime = None, format: str = TIMESTAMP_FORMAT_MICROS) -> str:
    if not time:
        time = now_utc()
    if isinstance(time, (int, float)):
        time = datetime.fromtimestamp(time, tz=timezone.utc)
    return time.strftime(format)


def timestamp_millis(time: datetime = None) -> str:
    microsecond_time = timestamp(time=time, format=TIMESTAMP_FORMAT_MICROS)
    # truncating microseconds to milliseconds, while leaving the "Z" indicator
    return microsecond_time[:-4] + microsecond_time[-1]
