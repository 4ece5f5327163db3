from datetime import datetime, timedelta

IST_OFFSET = timedelta(hours=5, minutes=30)


def get_ist_now():
    """
    Returns the current datetime in Indian Standard Time (IST)
    IST is UTC+5:30
    """
    return datetime.utcnow() + IST_OFFSET


def format_ist_datetime(dt, format_str="%d %b %Y, %I:%M %p IST"):
    """
    Formats a UTC datetime object to IST string representation
    """
    if dt is None:
        return None
    return (dt + IST_OFFSET).strftime(format_str)
