from datetime import datetime, timezone


def now_utc() -> datetime:
    # BSON dates have millisecond precision; trim so stored and returned values compare equal
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000, tzinfo=None)
