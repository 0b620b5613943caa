def to_int(value: object) -> int | None:
    """Coerce a value to an integer if possible.

    Only plain decimal digits are accepted for strings, so ``"+6"`` or
    ``" 6"`` are rejected.

    Args:
        value: Value to coerce.

    Returns:
        Integer value or None.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return None
