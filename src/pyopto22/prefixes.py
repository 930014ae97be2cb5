"""Resolve variable names to categories by their leading lowercase prefix."""

import re
from collections.abc import Mapping
from types import MappingProxyType

from .errors import NoPrefixError, UnknownPrefixError
from .types import WIRE_INTEGER_BOOLEANS, Category

# Maximal leading run of lowercase letters, e.g. "it" in "itCounts"
_PREFIX_PATTERN = re.compile(r"^([a-z]+)")


def extract_prefix(name: str) -> str:
    """
    Return the leading lowercase run of a variable name.

    Raises NoPrefixError when the name does not start with a lowercase letter.
    """
    m = _PREFIX_PATTERN.match(name)
    if not m:
        raise NoPrefixError(name)
    return m.group(1)


class PrefixTable:
    """
    Read-only mapping of lowercase prefix -> Category.

    Prefixes are matched whole: the maximal leading lowercase run of a name must
    be a key, there is no fallback to a shorter prefix.
    """

    def __init__(self, prefixes: Mapping[str, Category]) -> None:
        for prefix in prefixes:
            if not _PREFIX_PATTERN.fullmatch(prefix):
                raise ValueError(f"Prefix must be lowercase letters only: {prefix!r}")
        self._prefixes: Mapping[str, Category] = MappingProxyType(dict(prefixes))

    def resolve(self, name: str) -> Category:
        """Return the category of a variable name; raise NoPrefixError / UnknownPrefixError."""
        prefix = extract_prefix(name)
        try:
            return self._prefixes[prefix]
        except KeyError:
            raise UnknownPrefixError(name, prefix) from None

    def try_resolve(self, name: str) -> Category | None:
        """Like resolve() but returns None for names that do not follow the prefix convention."""
        m = _PREFIX_PATTERN.match(name)
        if not m:
            return None
        return self._prefixes.get(m.group(1))

    def is_boolean(self, name: str) -> bool:
        """True when the name carries a prefix designating a boolean overlay on integers."""
        category = self.try_resolve(name)
        return category in WIRE_INTEGER_BOOLEANS

    @property
    def prefixes(self) -> Mapping[str, Category]:
        return self._prefixes

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._prefixes

    def __len__(self) -> int:
        return len(self._prefixes)
