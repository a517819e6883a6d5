from __future__ import annotations

import logging

from ..errors import PlacementError
from ..pipeline import InstallContext

logger = logging.getLogger(__name__)


class ConfigureEnvironmentStep:
    step_id = "80_configure_environment"
    mutating = True

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.target is None:
            raise RuntimeError("install target missing")
        if not ctx.artifact.on_path:
            return ctx

        directory = ctx.target.directory
        ctx.environment.apply(directory)
        if not ctx.environment.verify(directory):
            raise PlacementError(f"{directory} is not on PATH after update")
        return ctx
