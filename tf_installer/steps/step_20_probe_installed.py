from __future__ import annotations

import logging

from ..pipeline import InstallContext

logger = logging.getLogger(__name__)


class ProbeInstalledStep:
    step_id = "20_probe_installed"
    mutating = False

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.target is None:
            raise RuntimeError("install target missing; run resolve step first")

        ctx.installed_version = ctx.probe_factory(ctx.target).query_version()
        if ctx.installed_version is None:
            logger.info("%s is not installed at %s", ctx.artifact.display_name, str(ctx.target.directory))
        else:
            logger.info("Installed %s version: %s", ctx.artifact.display_name, ctx.installed_version)
        return ctx
