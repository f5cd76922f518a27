"""Task graph for the bronze -> silver -> gold build."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from utils.io import logger


@dataclass
class Task:
    name: str
    run: Callable[[], object]
    layer: str = "gold"
    inputs: Sequence[str] = ()
    outputs: Sequence[str] = ()
    requires: List["Task"] = field(default_factory=list)
    _has_run: bool = field(default=False, init=False, repr=False)
    _running: bool = field(default=False, init=False, repr=False)

    def execute(self, force: bool = False) -> None:
        if self._has_run and not force:
            logger.debug("Skipping task %s (already completed)", self.name)
            return
        if self._running:
            raise RuntimeError(f"Dependency cycle detected at task '{self.name}'")
        self._running = True
        try:
            for dependency in self.requires:
                dependency.execute(force=force)
            logger.info("Running task: %s [%s]", self.name, self.layer)
            started = time.perf_counter()
            self.run()
            logger.info("Task %s done in %.2fs", self.name, time.perf_counter() - started)
        finally:
            self._running = False
        self._has_run = True

    def __call__(self) -> None:
        self.execute()


__all__ = ["Task"]
