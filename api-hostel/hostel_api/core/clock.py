# hostel_api/core/clock.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    # as colunas DateTime do banco guardam UTC sem tzinfo
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)
