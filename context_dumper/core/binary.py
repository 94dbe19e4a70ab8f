"""Binary content detection."""

DEFAULT_SAMPLE_SIZE = 8192

# printable ascii plus backspace, tab, lf, form feed, cr and escape
_TEXT_BYTES = frozenset(range(32, 127)) | {8, 9, 10, 12, 13, 27}


def _decodes_as_utf8(sample: bytes, truncated: bool) -> bool:
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError as e:
        # a sample cut from a longer file may end in the middle of a character
        return truncated and e.reason == "unexpected end of data" and e.start >= len(sample) - 3
    return True


def is_binary_content(content: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> bool:
    """Detect if content is binary by sampling the first bytes.

    Args:
        content: Raw file content
        sample_size: Number of bytes to sample from the start

    Returns:
        True if content appears to be binary
    """
    if not content:
        return False

    sample = content[:sample_size]

    # Check for null bytes (strong binary indicator)
    if b"\x00" in sample:
        return True

    if _decodes_as_utf8(sample, truncated=len(content) > len(sample)):
        return False

    # Legacy single-byte encodings: binary only when mostly non-printable
    non_text = sum(1 for byte in sample if byte not in _TEXT_BYTES)
    return (non_text / len(sample)) > 0.30
