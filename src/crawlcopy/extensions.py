"""File-type filtering for discovered entries.

Extensions are compared case-insensitively. A configuration string with an
empty segment (``".py,"`` or ``""``) yields the empty-string member, which
matches files that have no extension at all.
"""

from __future__ import annotations

from .models import FileRecord

DEFAULT_FILE_TYPES = ".py"
DEFAULT_SEPARATOR = ","


def parse_file_types(file_types: str, sep: str = DEFAULT_SEPARATOR) -> frozenset[str]:
    """Split a delimited list of extensions into a lower-cased lookup set.

    Segments are not stripped or dropped, so ``".py,"`` produces
    ``{".py", ""}``.
    """
    if not sep:
        raise ValueError("Extension separator must not be empty")
    return frozenset(segment.lower() for segment in file_types.split(sep))


def extension_of(name: str) -> str:
    """Return the suffix of *name* starting at its final dot.

    ``"archive.tar.gz"`` gives ``".gz"``, ``".bashrc"`` gives ``".bashrc"``
    and ``"Makefile"`` gives ``""``.
    """
    index = name.rfind(".")
    if index < 0:
        return ""
    return name[index:]


class ExtensionFilter:
    """Case-insensitive membership test over file suffixes."""

    def __init__(self, extensions: frozenset[str]) -> None:
        self.extensions = extensions

    @classmethod
    def from_string(cls, file_types: str, sep: str = DEFAULT_SEPARATOR) -> "ExtensionFilter":
        return cls(parse_file_types(file_types, sep))

    def matches(self, record: FileRecord) -> bool:
        """Return True for non-directory records whose extension is in the set."""
        if record.is_dir:
            return False
        return record.ext.lower() in self.extensions
