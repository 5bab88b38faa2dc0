import datetime
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from resellerhub.core.config import REPORT_TIMEZONE


def utcnow() -> datetime.datetime:
    """Current UTC time as a naive datetime, matching how the DateTime columns store it."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def add_months(moment: datetime.datetime, months: int) -> datetime.datetime:
    """
    Shift a timestamp by whole calendar months.
    Day-of-month is kept where valid and clamped to the last day otherwise
    (Jan 31 + 1 month -> Feb 28, or Feb 29 in a leap year).
    """
    if months < 0:
        raise ValueError("months must be non-negative")
    return moment + relativedelta(months=months)


def report_zone() -> ZoneInfo:
    return ZoneInfo(REPORT_TIMEZONE)


def local_date(moment: datetime.datetime) -> datetime.date:
    """Calendar day of a stored (naive UTC) timestamp in the reporting time zone."""
    aware = moment.replace(tzinfo=datetime.timezone.utc)
    return aware.astimezone(report_zone()).date()


def month_key(moment: datetime.datetime) -> str:
    return local_date(moment).strftime("%Y-%m")


def local_today(now: datetime.datetime = None) -> datetime.date:
    return local_date(now or utcnow())


def local_day_bounds(day: datetime.date):
    """(start, end) of a local calendar day expressed as naive UTC, end exclusive."""
    start_local = datetime.datetime.combine(day, datetime.time.min, tzinfo=report_zone())
    end_local = start_local + datetime.timedelta(days=1)
    return (
        start_local.astimezone(datetime.timezone.utc).replace(tzinfo=None),
        end_local.astimezone(datetime.timezone.utc).replace(tzinfo=None),
    )


def local_month_start(now: datetime.datetime = None) -> datetime.datetime:
    """Start of the current local calendar month, as naive UTC."""
    today = local_today(now)
    start, _ = local_day_bounds(today.replace(day=1))
    return start
