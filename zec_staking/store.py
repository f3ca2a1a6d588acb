"""Single-writer owner of the current calculator ParameterSet."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Mapping

from .params import DEFAULT_PARAMS, ParameterSet, merge, normalize

Listener = Callable[[ParameterSet], None]


class ParameterStore:
    """Holds the validated ParameterSet and notifies listeners after each commit.

    Updates requested while listeners are being notified are queued and applied
    in order once the current notification finishes, so listeners never observe
    two transitions interleaved.
    """

    def __init__(self, initial: ParameterSet | None = None) -> None:
        self._params = normalize(initial) if initial is not None else DEFAULT_PARAMS
        self._listeners: list[Listener] = []
        self._pending: deque[Callable[[], ParameterSet]] = deque()
        self._notifying = False

    def get(self) -> ParameterSet:
        return self._params

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, partial: Mapping[str, Any] | None = None, **fields: Any) -> ParameterSet:
        """Merge a partial update, clamp it, commit it and notify listeners once."""
        update = dict(partial or {})
        update.update(fields)
        self._submit(lambda: merge(self._params, update))
        return self._params

    def reset(self) -> ParameterSet:
        self._submit(lambda: DEFAULT_PARAMS)
        return self._params

    def replace(self, params: ParameterSet) -> ParameterSet:
        """Commit a whole ParameterSet (e.g. one decoded from a URL)."""
        self._submit(lambda: normalize(params))
        return self._params

    def _submit(self, transition: Callable[[], ParameterSet]) -> None:
        self._pending.append(transition)
        if self._notifying:
            return
        self._notifying = True
        try:
            while self._pending:
                self._params = self._pending.popleft()()
                snapshot = self._params
                for listener in list(self._listeners):
                    listener(snapshot)
        finally:
            self._notifying = False
            self._pending.clear()
