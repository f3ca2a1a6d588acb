"""Calculator session: store -> engine -> listeners and URL sync."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping

from . import codec
from .params import FIELD_BOUNDS, ParameterSet, clamp_field, parse_number
from .store import ParameterStore
from .yields import DerivedMetrics, StakingConstants, YieldVariant, compute

LOGGER = logging.getLogger(__name__)

ChangeListener = Callable[[ParameterSet, DerivedMetrics], None]
HistoryWriter = Callable[[str], None]


class CalculatorSession:
    """Owns the ParameterStore and fans committed changes out to collaborators.

    ``on_change`` listeners receive ``(params, metrics)`` once per committed
    transition. The optional ``history`` writer receives the share URL for the
    new state.
    """

    def __init__(
        self,
        initial: ParameterSet | None = None,
        *,
        base_url: str | None = None,
        history: HistoryWriter | None = None,
        constants: StakingConstants | None = None,
        variant: YieldVariant | str = YieldVariant.POOLED,
    ) -> None:
        self.store = ParameterStore(initial)
        self.base_url = base_url
        self.history = history
        self.constants = constants
        self.variant = YieldVariant(variant)
        self._listeners: list[ChangeListener] = []
        self._metrics = self._compute(self.store.get())
        self.store.subscribe(self._on_commit)

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "CalculatorSession":
        params = codec.decode(
            url, constants=kwargs.get("constants"), variant=kwargs.get("variant", YieldVariant.POOLED)
        )
        return cls(params, **kwargs)

    @property
    def params(self) -> ParameterSet:
        return self.store.get()

    @property
    def metrics(self) -> DerivedMetrics:
        return self._metrics

    @property
    def share_url(self) -> str:
        return codec.build_share_url(
            self.params, self.base_url, constants=self.constants, variant=self.variant
        )

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, partial: Mapping[str, Any] | None = None, **fields: Any) -> ParameterSet:
        return self.store.set(partial, **fields)

    def reset(self) -> ParameterSet:
        return self.store.reset()

    def load_url(self, url: str) -> ParameterSet:
        params = codec.decode(url, constants=self.constants, variant=self.variant)
        return self.store.replace(params)

    def preview(self, params: ParameterSet) -> DerivedMetrics:
        return self._compute(params)

    def field(self, name: str) -> "FieldInput":
        return FieldInput(self, name)

    def _compute(self, params: ParameterSet) -> DerivedMetrics:
        return compute(params, constants=self.constants, variant=self.variant)

    def _on_commit(self, params: ParameterSet) -> None:
        self._metrics = self._compute(params)
        if self.history is not None:
            self.history(self.share_url)
        for listener in list(self._listeners):
            listener(params, self._metrics)


@dataclass(frozen=True)
class FieldPreview:
    text: str
    value: float
    valid: bool
    params: ParameterSet
    metrics: DerivedMetrics


class FieldInput:
    """Two-phase numeric entry for one ParameterSet field.

    ``edit`` keeps the raw text and drives a live preview from the best-effort
    parse without touching the store. ``blur`` commits the parsed value, or puts
    the committed value back into the text when the text does not parse. Any
    commit, from this field or elsewhere, resyncs the text and drops a pending
    edit.
    """

    def __init__(self, session: CalculatorSession, name: str) -> None:
        if name not in FIELD_BOUNDS:
            raise ValueError(f"Not a numeric parameter: {name!r}")
        self.session = session
        self.name = name
        self.text = self._committed_text()
        self.dirty = False
        self.close = session.store.subscribe(self._on_commit)

    @property
    def committed(self) -> float:
        return getattr(self.session.params, self.name)

    def _committed_text(self) -> str:
        return codec.format_number(self.committed)

    def _on_commit(self, params: ParameterSet) -> None:
        self.text = codec.format_number(getattr(params, self.name))
        self.dirty = False

    def edit(self, text: str) -> FieldPreview:
        self.text = text
        self.dirty = True
        number = parse_number(text)
        valid = number is not None
        value = clamp_field(self.name, number) if valid else self.committed
        params = replace(self.session.params, **{self.name: value})
        return FieldPreview(
            text=text,
            value=value,
            valid=valid,
            params=params,
            metrics=self.session.preview(params),
        )

    def blur(self) -> ParameterSet:
        if not self.dirty:
            return self.session.params
        self.dirty = False
        number = parse_number(self.text)
        if number is None:
            LOGGER.debug("Discarding unparsable %s input %r", self.name, self.text)
            self.text = self._committed_text()
            return self.session.params
        return self.session.set({self.name: number})
