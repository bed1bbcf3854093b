def require_utf8(value: str | None) -> str | None:
    """Reject strings holding lone surrogates, which no store can encode."""
    if value is not None:
        try:
            value.encode('utf-8')
        except UnicodeEncodeError as exc:
            raise ValueError('Must be valid UTF-8 text.') from exc
    return value
