from pathlib import Path

# UTF-32 LE must be checked before UTF-16 LE: both start with FF FE.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xff\xfe\x00\x00", "utf-32"),
    (b"\xff\xfe", "utf-16"),
    (b"\xfe\xff", "utf-16"),
)


def detect_encoding(head: bytes) -> str:
    """Pick a codec from the byte-order mark, defaulting to UTF-8.

    The returned BOM-aware codecs consume the mark while decoding.
    """
    for bom, codec in _BOMS:
        if head.startswith(bom):
            return codec
    return "utf-8"


def read_text(path: Path) -> tuple[str, str]:
    """Read a text file, returning ``(content, codec)``.

    Undecodable bytes are replaced rather than failing the whole file.
    """
    raw = path.read_bytes()
    codec = detect_encoding(raw[:4])
    return raw.decode(codec, errors="replace"), codec
