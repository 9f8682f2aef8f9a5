from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def merge_by_key(local: Iterable[T], remote: Iterable[T], key_fn: Callable[[T], K]) -> list[T]:
    """Union *local* and *remote* by ``key_fn``; on a shared key the remote item wins.

    Local-only items are kept, so a failed or partial remote read never drops
    anything from the cache. Order: local items first (in their order, with remote
    replacements applied in place), then remote-only items.
    """
    remote_by_key: dict[K, T] = {}
    for item in remote:
        remote_by_key[key_fn(item)] = item

    merged: list[T] = []
    seen: set[K] = set()
    for item in local:
        key = key_fn(item)
        if key in seen:
            continue
        seen.add(key)
        merged.append(remote_by_key.get(key, item))
    for key, item in remote_by_key.items():
        if key not in seen:
            seen.add(key)
            merged.append(item)
    return merged
