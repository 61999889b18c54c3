def to_uppercase(value: str | None) -> str | None:
    """
    Converts a string to uppercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().lower()


def strip_trailing_slash(value: str | None) -> str | None:
    """
    Remove trailing '/' from a base URL so links can be joined as f"{base}/pull/{n}".
    """
    if value is None:
        return None
    return str(value).strip().rstrip("/")


def empty_to_none(value):
    # .env files commonly carry `README_PATH=` to mean "unset"
    if isinstance(value, str) and not value.strip():
        return None
    return value
