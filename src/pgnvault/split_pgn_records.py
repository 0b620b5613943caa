RECORD_SEPARATOR = "\n\n\n"


def split_pgn_records(text: str) -> list[str]:
    """Split a monthly PGN blob into game records on runs of two blank lines.

    Records are stripped and whitespace-only partitions (such as the one after
    the trailing separator) are dropped.
    """
    if not text:
        return []
    normalized = text.replace("\r\n", "\n")
    return [chunk.strip() for chunk in normalized.split(RECORD_SEPARATOR) if chunk.strip()]
