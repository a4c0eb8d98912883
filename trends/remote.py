"""Load state of an upstream dataset as a closed set of variants.

``NotAsked``, ``Loading``, ``Failure`` and ``Success`` are the only members of
``RemoteData``; :func:`fold` requires a handler for each of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from trends.errors import TrendsError


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class NotAsked:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Failure:
    error: str


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T


RemoteData = Union[NotAsked, Loading, Failure, Success]


def fold(
    state: RemoteData,
    *,
    not_asked: Callable[[], R],
    loading: Callable[[], R],
    failure: Callable[[str], R],
    success: Callable[[Any], R],
) -> R:
    if isinstance(state, NotAsked):
        return not_asked()
    if isinstance(state, Loading):
        return loading()
    if isinstance(state, Failure):
        return failure(state.error)
    if isinstance(state, Success):
        return success(state.data)
    raise TypeError(f"not a RemoteData value: {state!r}")


def refresh(parse: Callable[[Any], T], payload: Any) -> RemoteData:
    """Run ``parse`` over a decoded payload; shape errors become a single ``Failure``."""
    try:
        return Success(parse(payload))
    except TrendsError as exc:
        logger.exception("data refresh failed")
        return Failure(f"error reading data: {exc}")
