"""Container runtime selection for lavalinkctl."""

import logging
import shutil
from typing import Callable, Optional, Sequence

from lavalinkctl.models import FALLBACK_RUNTIME, SUPPORTED_RUNTIMES, RuntimeChoice


class RuntimeSelector:
    """Picks the container runtime executable for a single invocation."""

    def __init__(
        self,
        logger: logging.Logger,
        which: Optional[Callable[[str], Optional[str]]] = None,
        candidates: Sequence[str] = SUPPORTED_RUNTIMES,
    ):
        self.logger = logger
        self.which = which or shutil.which
        self.candidates = tuple(candidates)

    def select(self, override: Optional[str] = None) -> RuntimeChoice:
        if override:
            self.logger.debug("Using container runtime from CONTAINER_RUNTIME: %s", override)
            return RuntimeChoice(name=override, source="override")

        for candidate in self.candidates:
            if self.which(candidate):
                self.logger.debug("Detected container runtime: %s", candidate)
                return RuntimeChoice(name=candidate, source="detected")

        # Execution reports the missing binary; selection itself never fails.
        self.logger.warning(
            "No container runtime found (tried %s), falling back to %s",
            ", ".join(self.candidates),
            FALLBACK_RUNTIME,
        )
        return RuntimeChoice(name=FALLBACK_RUNTIME, source="fallback")
