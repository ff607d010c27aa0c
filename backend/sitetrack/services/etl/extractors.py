from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from sitetrack.services.etl.utils import norm_str


def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    if isinstance(v, float):
        return v != v
    return False


@dataclass(frozen=True)
class FieldChain:
    """Ordered list of field names; the first non-blank one wins.

    Works on mappings (by key) and on plain objects (by attribute), so the
    same chain reads a raw backend row and a normalized record. With
    ``convert`` the converted value must also be non-None to count, so an
    unparseable date falls through to the next field.
    """

    names: tuple[str, ...]

    def __init__(self, *names: str):
        object.__setattr__(self, "names", tuple(names))

    def _lookup(self, source: Any, name: str) -> Any:
        if isinstance(source, Mapping):
            return source.get(name)
        return getattr(source, name, None)

    def get(self, source: Any, convert: Callable[[Any], Any] | None = None, default: Any = None) -> Any:
        if source is None:
            return default
        for name in self.names:
            v = self._lookup(source, name)
            if _is_blank(v):
                continue
            if convert is not None:
                v = convert(v)
                if v is None:
                    continue
            return v
        return default

    def text(self, source: Any) -> str | None:
        return self.get(source, convert=norm_str)

    def __add__(self, other: "FieldChain") -> "FieldChain":
        return FieldChain(*(self.names + other.names))
