"""Append-only code tables for enumerated Id fields.

Issued Ids embed the raw integer codes, so an entry's code can never change.
New names are added with :meth:`CodeTable.extend`, which only appends and
refuses to reassign an existing name or code.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class CodeTable:
    """Immutable, ordered mapping between names and stable integer codes."""

    __slots__ = ("_by_code", "_by_name", "_label", "_entries")

    def __init__(self, label: str, entries: Iterable[tuple[str, int]]) -> None:
        self._label = label
        self._entries: tuple[tuple[str, int], ...] = ()
        self._by_name: dict[str, int] = {}
        self._by_code: dict[int, str] = {}
        self._append(tuple(entries))

    @classmethod
    def sequential(cls, label: str, *names: str, start: int = 1) -> CodeTable:
        """Build a table whose codes are positions in *names*, counting from *start*."""
        return cls(label, ((name, start + i) for i, name in enumerate(names)))

    def _append(self, entries: tuple[tuple[str, int], ...]) -> None:
        for name, code in entries:
            if not name:
                raise ValueError(f"{self._label}: empty name")
            if code <= 0:
                raise ValueError(f"{self._label}: code for {name!r} must be positive")
            if name in self._by_name:
                raise ValueError(f"{self._label}: {name!r} already has code {self._by_name[name]}")
            if code in self._by_code:
                raise ValueError(f"{self._label}: code {code} already used by {self._by_code[code]!r}")
            self._by_name[name] = code
            self._by_code[code] = name
        self._entries = self._entries + entries

    def extend(self, *entries: tuple[str, int]) -> CodeTable:
        """Return a new table with *entries* appended after the existing ones."""
        return CodeTable(self._label, self._entries + tuple(entries))

    def extend_sequential(self, *names: str) -> CodeTable:
        """Append *names*, numbering them after the current highest code."""
        nxt = max(self._by_code, default=0) + 1
        return self.extend(*((name, nxt + i) for i, name in enumerate(names)))

    @property
    def label(self) -> str:
        return self._label

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self._entries)

    def code(self, name: str) -> int:
        """Return the code for *name*. Raises ``KeyError`` when unknown."""
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown {self._label}: {name!r}") from None

    def name(self, code: int) -> str:
        """Return the name for *code*. Raises ``KeyError`` when unknown."""
        try:
            return self._by_code[code]
        except KeyError:
            raise KeyError(f"Unknown {self._label} code: {code}") from None

    def is_prefix_of(self, other: CodeTable) -> bool:
        """True when *other* keeps every entry of this table at the same position."""
        return other._entries[: len(self._entries)] == self._entries

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CodeTable({self._label!r}, {list(self._entries)!r})"


REGIONS = CodeTable.sequential("region", "us-east-1")

ENVIRONMENTS = CodeTable.sequential("environment", "production", "staging", "development")

# Multihash function codes (https://github.com/multiformats/multicodec).
HASH_FUNCTIONS = CodeTable(
    "hash function",
    [
        ("sha1", 0x11),
        ("sha2-256", 0x12),
        ("sha2-512", 0x13),
        ("sha3-512", 0x14),
        ("sha3-384", 0x15),
        ("sha3-256", 0x16),
        ("sha3-224", 0x17),
        ("sha2-384", 0x20),
        ("blake2b-256", 0xB220),
        ("blake2b-512", 0xB240),
        ("blake2s-256", 0xB260),
    ],
)
