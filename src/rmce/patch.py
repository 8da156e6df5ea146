"""Explicit partial-update ("patch") values.

Each field of a patch is either ``UNSET`` (keep the stored value) or a new
value. A JSON ``null`` in a request counts as unset, so an update can never
clear a column back to NULL. Patches are applied field by field against a
loaded ORM record inside the caller's transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from pydantic import BaseModel


class _Unset:
    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class Patch:
    """Base class for per-entity patches. Subclasses declare fields defaulting to UNSET."""

    @classmethod
    def from_payload(cls, payload: BaseModel) -> Patch:
        """Build a patch from a request model; omitted and null fields stay UNSET."""
        names = {f.name for f in fields(cls)}
        values = {k: v for k, v in payload.model_dump(exclude_none=True).items() if k in names}
        return cls(**values)

    def changes(self) -> dict[str, Any]:
        """Fields that carry a value."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET

    def merged(self, name: str, current: Any) -> Any:  # noqa: ANN401
        """The value a field will hold after the patch is applied."""
        value = getattr(self, name)
        return current if value is UNSET else value

    def apply(self, record: Any) -> None:  # noqa: ANN401
        """Write every set field onto ``record``."""
        for name, value in self.changes().items():
            setattr(record, name, value)


@dataclass(frozen=True)
class RoutePatch(Patch):
    name: Any = UNSET
    description: Any = UNSET
    is_public: Any = UNSET
    path_data: Any = UNSET
    distance_meters: Any = UNSET


@dataclass(frozen=True)
class ChallengePatch(Patch):
    status: Any = UNSET
    challenger_time: Any = UNSET
    challenged_time: Any = UNSET


@dataclass(frozen=True)
class PostPatch(Patch):
    title: Any = UNSET
    body: Any = UNSET
