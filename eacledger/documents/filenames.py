"""Storage-safe file names and object paths for uploaded documents."""

import re
import unicodedata

PLACEHOLDER_BASE = "file"
MAX_BASE_LENGTH = 200
MAX_EXT_LENGTH = 16

_UNSAFE_BASE = re.compile(r"[^A-Za-z0-9._-]")
_UNSAFE_EXT = re.compile(r"[^A-Za-z0-9]")
_SEPARATOR_RUN = re.compile(r"[._-]{2,}")
_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = "._-"


def _ascii(text: str) -> str:
    return unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")


def split_name(file_name: str) -> tuple[str, str]:
    """Split a file name into (base, extension) on the last dot.

    Directory components are dropped; a leading dot (``.env``) is part of the
    base, not an extension.
    """
    name = re.split(r"[\\/]", file_name)[-1]
    dot = name.rfind(".")
    if dot <= 0 or dot == len(name) - 1:
        return name, ""
    return name[:dot], name[dot + 1 :]


def sanitize_file_name(
    file_name: str,
    *,
    max_base_length: int = MAX_BASE_LENGTH,
    max_ext_length: int = MAX_EXT_LENGTH,
) -> str:
    """Return a name made only of ``[A-Za-z0-9._-]``, never empty.

    Examples:
        >>> sanitize_file_name("Rapport d'audit (final).PDF")
        'Rapport-daudit-final.PDF'
        >>> sanitize_file_name("../..//")
        'file'
    """
    base, ext = split_name(file_name)

    base = _WHITESPACE.sub("-", _ascii(base).strip())
    base = _UNSAFE_BASE.sub("", base)
    base = _SEPARATOR_RUN.sub(lambda m: m.group(0)[0], base)
    base = base.strip(_SEPARATORS)
    base = base[:max_base_length].rstrip(_SEPARATORS)
    if not base:
        base = PLACEHOLDER_BASE

    ext = _UNSAFE_EXT.sub("", _ascii(ext))[:max_ext_length]

    return f"{base}.{ext}" if ext else base


def object_path(doc_id: str, sanitized_name: str) -> str:
    """Object path namespaced by document id: ``{doc_id}/{name}``."""
    return f"{doc_id}/{sanitized_name}"
