import copy
from typing import Any, Callable, Generic, Iterator, TypeVar


Update = Callable[[Any], Any]


T = TypeVar('T', bound=dict[str, Any])
V = TypeVar('V')


class Context(Generic[T]):
    """
    The server-wide key/value store handed to every extension's
    `on_start` and exposed on every connection as `connection.data`.

    One instance lives for the whole server run. Only the intake
    thread mutates it, so reads and writes take no locks. Workers
    receive a `copy()` taken when the pool spawns.
    """

    def __init__(
        self,
        init_context: T | None = None
    ):
        self._store: T = init_context if init_context is not None else {}

    def __getitem__(self, key: str):
        return self._store[key]

    def __setitem__(self, key: str, value: Any):
        self._store[key] = value

    def __delitem__(self, key: str):
        del self._store[key]

    def __contains__(self, key: str):
        return key in self._store

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self):
        return len(self._store)

    def read(self, key: str, default: V | None = None):
        return self._store.get(key, default)

    def update(self, key: str, update: Update):
        self._store[key] = update(
            self._store.get(key)
        )

        return self._store[key]

    def write(self, key: str, value: V):
        self._store[key] = value
        return self._store[key]

    def delete(self, key: str):
        self._store.pop(key, None)

    def merge(self, update: T):
        self._store.update(update)

    def dict(self) -> T:
        return dict(self._store)

    def copy(self):
        memo: dict[int, Any] = {}

        return Context({
            key: copy_or_share(value, memo)
            for key, value in self._store.items()
        })


def copy_or_share(value: Any, memo: dict[int, Any]) -> Any:
    """
    Deep copy `value` against `memo`, or return `value` itself when it
    cannot be copied (locks, sockets, open files). A shared value is
    recorded in `memo`, so later copies that reach it share it too.
    """
    attempt = dict(memo)

    try:
        copied = copy.deepcopy(value, attempt)

    except (TypeError, copy.Error):
        memo[id(value)] = value
        return value

    # deepcopy keeps temporaries alive under the memo's own id
    keep_alive = attempt.pop(id(attempt), None)
    if keep_alive:
        memo.setdefault(id(memo), []).extend(keep_alive)

    memo.update(attempt)

    return copied
