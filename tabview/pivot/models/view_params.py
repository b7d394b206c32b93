"""View definition model: pivots, sort order and expanded tree paths.

Architecture:
    ViewParams is an immutable value. Every configuration change goes through
    one of the ``with_*`` / path transitions and yields a new instance, so the
    requester can detect a changed view definition with an identity check
    instead of a deep comparison.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

Path = tuple[str, ...]
SortKey = tuple[tuple[str, bool], ...]


def _as_path(path: Iterable[str]) -> Path:
    return tuple(str(p) for p in path)


class OpenPaths(BaseModel):
    """Set of expanded tree paths.

    Opening a path does not open its ancestors; a node is only visible as
    expanded when every ancestor is expanded too, which is the query
    engine's concern.
    """

    paths: frozenset[Path] = frozenset()

    model_config = ConfigDict(frozen=True)

    def is_open(self, path: Iterable[str]) -> bool:
        return _as_path(path) in self.paths

    def open(self, path: Iterable[str]) -> OpenPaths:
        return OpenPaths(paths=self.paths | {_as_path(path)})

    def close(self, path: Iterable[str]) -> OpenPaths:
        """Close ``path`` and every path below it."""
        target = _as_path(path)
        depth = len(target)
        return OpenPaths(paths=frozenset(p for p in self.paths if p[:depth] != target))

    def __iter__(self) -> Iterator[Path]:  # type: ignore[override]
        return iter(sorted(self.paths))

    def __len__(self) -> int:
        return len(self.paths)


class ViewParams(BaseModel):
    """Immutable pivot/sort/expansion configuration of the tabular view."""

    vpivots: tuple[str, ...] = ()
    pivot_leaf_column: str | None = None
    show_root: bool = False
    sort_key: SortKey = ()
    open_paths: OpenPaths = Field(default_factory=OpenPaths)

    model_config = ConfigDict(frozen=True)

    @field_validator("vpivots")
    @classmethod
    def validate_pivots(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Pivot columns must be unique."""
        if len(set(v)) != len(v):
            raise ValueError("pivot columns must be unique")
        return v

    @property
    def pivot_count(self) -> int:
        return len(self.vpivots)

    def with_pivots(self, vpivots: Sequence[str]) -> ViewParams:
        """Return new params pivoted on ``vpivots``.

        Expanded paths are reset: they name values of the previous pivot
        sequence.
        """
        return ViewParams(
            vpivots=tuple(vpivots),
            pivot_leaf_column=self.pivot_leaf_column,
            show_root=self.show_root,
            sort_key=self.sort_key,
        )

    def with_sort_key(self, sort_key: Iterable[tuple[str, bool]]) -> ViewParams:
        return self.model_copy(update={"sort_key": tuple(sort_key)})

    def with_show_root(self, show_root: bool) -> ViewParams:
        return self.model_copy(update={"show_root": show_root})

    def with_leaf_column(self, column: str | None) -> ViewParams:
        return self.model_copy(update={"pivot_leaf_column": column})

    def open_path(self, path: Iterable[str]) -> ViewParams:
        return self.model_copy(update={"open_paths": self.open_paths.open(path)})

    def close_path(self, path: Iterable[str]) -> ViewParams:
        return self.model_copy(update={"open_paths": self.open_paths.close(path)})

    def toggle_path(self, path: Iterable[str]) -> ViewParams:
        path = _as_path(path)
        if self.open_paths.is_open(path):
            return self.close_path(path)
        return self.open_path(path)
