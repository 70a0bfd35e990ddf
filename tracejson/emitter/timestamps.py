import datetime

RFC3339 = "rfc3339"


class TimestampFormatter:
    """Formats event times at a fixed UTC offset.

    Args:
        pattern: ``rfc3339`` for ISO 8601 with microseconds, or a strftime
            pattern
        utc_offset_hours: Offset applied to every timestamp
    """

    def __init__(self, pattern: str = RFC3339, utc_offset_hours: int = 0):
        self.pattern = pattern
        self.tz = datetime.timezone(datetime.timedelta(hours=utc_offset_hours))

    def now(self) -> datetime.datetime:
        return datetime.datetime.now(self.tz)

    def format(self, moment: datetime.datetime | None = None) -> str:
        moment = self.now() if moment is None else moment.astimezone(self.tz)
        if self.pattern == RFC3339:
            text = moment.isoformat(timespec="microseconds")
            return text[:-6] + "Z" if text.endswith("+00:00") else text
        return moment.strftime(self.pattern)
