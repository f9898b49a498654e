"""Pipeline class — ordered container of RequestStages."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi_incoming_request.stage import RequestStage


@dataclass(frozen=True)
class ResolvedPipeline:
    """Immutable, pre-computed execution plan."""

    stages: tuple[RequestStage, ...]


class Pipeline:
    """Ordered container of RequestStage instances."""

    def __init__(self, *stages: RequestStage | Pipeline) -> None:
        self._items: list[RequestStage | Pipeline] = list(stages)
        self._resolved: ResolvedPipeline | None = None

    def add(self, *stages: RequestStage | Pipeline) -> Pipeline:
        self._items.extend(stages)
        self._resolved = None
        return self

    def resolve(self) -> ResolvedPipeline:
        if self._resolved is not None:
            return self._resolved

        flat: list[RequestStage] = []
        self._flatten(self._items, flat)

        self._resolved = ResolvedPipeline(
            stages=tuple(sorted(flat, key=lambda s: s.category.order)),
        )
        return self._resolved

    @staticmethod
    def _flatten(
        items: list[RequestStage | Pipeline], out: list[RequestStage]
    ) -> None:
        for item in items:
            if isinstance(item, Pipeline):
                Pipeline._flatten(item._items, out)
            elif isinstance(item, RequestStage):
                out.append(item)
            else:
                raise TypeError(
                    f"Pipeline items must be RequestStage or Pipeline, "
                    f"got {type(item).__name__}"
                )
