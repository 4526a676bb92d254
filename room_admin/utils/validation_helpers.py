from datetime import timezone


def to_naive_utc(value):
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def error_list(exc_errors):
    """Flatten pydantic error dicts into [{"field": ..., "message": ...}]."""
    result = []
    for error in exc_errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        result.append({"field": ".".join(location) or None, "message": error.get("msg")})
    return result
