"""Ports for resolving character metadata from external providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from esi_isk.domain.model import Affiliation


@runtime_checkable
class AffiliationProvider(Protocol):
    """Return the current affiliation of every requested character."""

    def __call__(self, character_ids: Iterable[int]) -> Sequence[Affiliation]: ...


@runtime_checkable
class NameResolver(Protocol):
    """Map character, corporation and alliance ids to display names."""

    def __call__(self, ids: Iterable[int]) -> Mapping[int, str]: ...


__all__ = ["AffiliationProvider", "NameResolver"]
