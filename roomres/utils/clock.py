from datetime import datetime
import pytz
from flask import current_app


def local_now():
    """Current wall-clock time in the configured campus timezone, as a naive datetime."""
    tz = pytz.timezone(current_app.config['TIMEZONE'])
    return datetime.now(tz).replace(tzinfo=None)


def parse_date(value):
    """Parse a YYYY-MM-DD query parameter. Returns None when absent."""
    if not value:
        return None
    return datetime.strptime(value, "%Y-%m-%d").date()
