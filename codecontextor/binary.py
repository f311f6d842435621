from __future__ import annotations

SAMPLE_SIZE = 8192
NULL_BYTE_THRESHOLD = 0.10
NON_PRINTABLE_THRESHOLD = 0.30

MAGIC_NUMBERS: tuple[bytes, ...] = (
    b"\x89PNG\r\n\x1a\n",  # PNG
    b"GIF87a",
    b"GIF89a",
    b"\xff\xd8\xff",  # JPEG
    b"PK\x03\x04",  # ZIP
    b"\x1f\x8b\x08",  # GZIP
    b"MZ",  # DOS/PE
    b"\x7fELF",
    b"%PDF-",
)

_TEXT_CONTROL = {9, 10, 13}


def is_binary(data: bytes) -> bool:
    """Classify a buffer as binary by magic number, then by sampled byte ratios."""
    if not data:
        return False
    if data.startswith(MAGIC_NUMBERS):
        return True

    sample = data[:SAMPLE_SIZE]
    null_bytes = 0
    non_printable = 0
    for b in sample:
        if b == 0:
            null_bytes += 1
        elif (b < 32 and b not in _TEXT_CONTROL) or b == 127:
            non_printable += 1

    n = len(sample)
    return (
        null_bytes / n > NULL_BYTE_THRESHOLD
        or non_printable / n > NON_PRINTABLE_THRESHOLD
    )
