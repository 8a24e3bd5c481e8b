from datetime import date, datetime, time
from typing import Optional, Union

from app.core.constants import STORE_TIME_FORMAT, STORE_TIMESTAMP_FORMAT
from app.core.exceptions import ValidationError


def local_now() -> datetime:
    """Current local wall-clock time, without microseconds."""
    return datetime.now().replace(microsecond=0)


def format_store_timestamp(value: datetime) -> str:
    return value.strftime(STORE_TIMESTAMP_FORMAT)


def format_store_time(value: Union[time, str]) -> str:
    if isinstance(value, time):
        return value.strftime(STORE_TIME_FORMAT)
    return str(value)


def combine_send_time(scheduled_date: date, scheduled_time: time) -> datetime:
    return datetime.combine(scheduled_date, scheduled_time)


def _naive_local(value: datetime) -> datetime:
    # Store timestamps are naive local time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_store_timestamp(value: Optional[Union[str, datetime]], field: str = "now") -> Optional[datetime]:
    """Accept 'YYYY-MM-DD HH:MM:SS' (or ISO 8601) strings and datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_local(value)
    text = str(value).strip()
    try:
        return datetime.strptime(text, STORE_TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(
            f"Invalid timestamp '{text}'. Expected YYYY-MM-DD HH:MM:SS.", field=field
        )
    return _naive_local(parsed)
