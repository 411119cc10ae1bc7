"""Prerequisite lists decoded from distribution metadata.

A prerequisite section maps a module name to a version. YAML writers are
inconsistent about quoting, so ``1.20`` may arrive as a float while
``"1.20"`` arrives as text. Numbers are canonicalized to their shortest
exact decimal form; text is taken as-is; anything else is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator, List, Mapping, Optional

from .models import Dependency


def canonical_version(value: Any) -> str:
    """Turn a decoded version value into its string form.

    Args:
        value: A ``str``, ``int`` or ``float`` from the decoded document.

    Returns:
        The version string; numbers use plain decimal notation with no
        exponent and no trailing zeros (``1.20`` -> ``"1.2"``).

    Raises:
        ValueError: If the value is neither textual nor numeric.
    """
    # bool is an int subclass, but "yes"/"true" is never a version
    if isinstance(value, bool):
        raise ValueError(f"unsupported version value {value!r}")
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"unsupported version value {value!r}")
        # repr() is the shortest round-tripping form; Decimal drops the exponent
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    raise ValueError(f"unsupported version value {value!r}")


@dataclass
class Prerequisites:
    """An unordered list of Dependency declared by one metadata section."""
    deps: List[Dependency] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[Any, Any]]) -> "Prerequisites":
        """Decode a ``name -> version`` mapping.

        A missing (null) section decodes to an empty list.

        Raises:
            ValueError: If the section is not a mapping or holds a value
                that is neither a string nor a number.
        """
        if mapping is None:
            return cls()
        if not isinstance(mapping, Mapping):
            raise ValueError(f"expected a mapping of prerequisites, got {type(mapping).__name__}")

        deps = []
        for name, version in mapping.items():
            try:
                deps.append(Dependency(str(name), canonical_version(version)))
            except ValueError as exc:
                raise ValueError(f"prerequisite {name}: {exc}") from exc
        return cls(deps)

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self.deps)

    def __len__(self) -> int:
        return len(self.deps)

    def names(self) -> List[str]:
        return [d.name for d in self.deps]

    def describe(self) -> List[str]:
        """One human-readable line per prerequisite."""
        return [f"require {d.name}, version {d.version}" for d in self.deps]
