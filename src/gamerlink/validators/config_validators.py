def normalize_case(value: str | None, *, upper: bool = True) -> str | None:
    """
    Upper- or lower-case a raw environment value, passing None through untouched.

    Used by the settings validators so that `LOG_LEVEL=debug` and `LOG_FORMAT=JSON`
    resolve to the literals the logging builder expects.
    """
    if value is None:
        return None
    value = value.strip()
    return value.upper() if upper else value.lower()
