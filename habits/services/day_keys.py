from datetime import date, datetime, time, tzinfo
from typing import Optional, Union

from django.utils import timezone


def reference_timezone() -> tzinfo:
    """
    Timezone that decides which calendar day an instant belongs to.

    Always the project default (settings.TIME_ZONE), never the timezone
    activated for the current request.
    """
    return timezone.get_default_timezone()


def day_key(instant: Optional[Union[datetime, date]] = None, tz: Optional[tzinfo] = None) -> date:
    """
    Map an instant to the calendar day containing it in the reference timezone.

    - None means "now"
    - naive datetimes are read as wall-clock time in the reference timezone
    - a bare date is already a day key
    """
    tz = tz or reference_timezone()
    if instant is None:
        instant = timezone.now()
    elif not isinstance(instant, datetime):
        return instant

    if timezone.is_naive(instant):
        instant = timezone.make_aware(instant, tz)
    return timezone.localtime(instant, tz).date()


def start_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Aware instant of local midnight at the start of `day`."""
    tz = tz or reference_timezone()
    return timezone.make_aware(datetime.combine(day, time.min), tz)
