from __future__ import annotations

import logging

from ..decision import InstallAction, decide_install
from ..pipeline import InstallContext

logger = logging.getLogger(__name__)


class DecideStep:
    step_id = "30_decide"
    mutating = False

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.version is None:
            raise RuntimeError("resolved version missing; run resolve step first")

        ctx.action = decide_install(ctx.version, ctx.installed_version, ctx.force)
        if ctx.action is InstallAction.SKIP:
            logger.info("%s %s already installed; nothing to do", ctx.artifact.display_name, ctx.version)
            ctx.halt("already installed")
            return ctx

        if ctx.force and ctx.installed_version == ctx.version:
            logger.info("Reinstalling %s %s (force)", ctx.artifact.display_name, ctx.version)
        else:
            logger.info(
                "Installing %s %s (installed: %s)",
                ctx.artifact.display_name,
                ctx.version,
                ctx.installed_version or "none",
            )
        return ctx
