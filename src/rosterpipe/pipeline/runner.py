"""Runner for named pipelines.

Holds a set of PipelineSpecs and runs them by name, counting how many
elements were visited and accepted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rosterpipe.pipeline.registry import PipelineSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunStats:
    """Outcome of one pipeline run.

    Attributes:
        visited: Elements handed to the selector
        accepted: Elements handed on to the transform and sink
    """

    visited: int
    accepted: int


class PipelineRunner:
    """Runs named pipelines against a source.

    Attributes:
        specs: Pipelines keyed by name, in registration order
    """

    def __init__(self, specs: list[PipelineSpec]) -> None:
        """Initialize runner with pipeline specs.

        Args:
            specs: Pipeline specifications

        Raises:
            ValueError: If two specs share a name
        """
        self.specs: dict[str, PipelineSpec] = {}
        for spec in specs:
            if spec.name in self.specs:
                raise ValueError(f"Duplicate pipeline name: {spec.name!r}")
            self.specs[spec.name] = spec

        logger.info("Registered pipelines: %s", ", ".join(self.specs) or "none")

    def names(self) -> list[str]:
        """Pipeline names in registration order."""
        return list(self.specs)

    def get(self, name: str) -> PipelineSpec:
        """Get a pipeline spec by name.

        Raises:
            KeyError: If no pipeline has that name
        """
        if name not in self.specs:
            raise KeyError(f"Unknown pipeline {name!r} (known: {', '.join(self.specs) or 'none'})")
        return self.specs[name]

    def run(self, name: str, source: Iterable[Any]) -> RunStats:
        """Run one pipeline over source.

        Failures raised by the pipeline's capabilities are logged and re-raised.

        Args:
            name: Pipeline name
            source: Elements to process

        Returns:
            Visit and acceptance counts
        """
        spec = self.get(name)
        visited = 0
        accepted = 0

        def counting_selector(element: Any) -> bool:
            nonlocal visited, accepted
            visited += 1
            ok = spec.selector(element)
            if ok:
                accepted += 1
            return ok

        logger.debug("Running pipeline '%s'", name)
        try:
            replace(spec, selector=counting_selector).run(source)
        except Exception as e:
            logger.error(
                "Pipeline '%s' failed after %d element(s): %s: %s",
                name,
                visited,
                type(e).__name__,
                str(e),
            )
            raise

        logger.debug("Pipeline '%s' finished: %d visited, %d accepted", name, visited, accepted)
        return RunStats(visited=visited, accepted=accepted)
