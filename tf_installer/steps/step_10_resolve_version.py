from __future__ import annotations

import logging

from ..lib.versions import resolve_version
from ..pipeline import InstallContext

logger = logging.getLogger(__name__)


class ResolveVersionStep:
    step_id = "10_resolve_version"
    mutating = False

    def run(self, ctx: InstallContext) -> InstallContext:
        ctx.version = resolve_version(
            ctx.spec,
            ctx.registry.list_versions,
            allow_prerelease=ctx.allow_prerelease,
            artifact=ctx.artifact.display_name,
        )
        ctx.target = ctx.artifact.target_for(ctx.install_root, ctx.version, ctx.os_name, ctx.arch)
        logger.info(
            "%s %s (%s) -> %s",
            ctx.artifact.display_name,
            ctx.version,
            ctx.target.platform_segment,
            str(ctx.target.binary_path),
        )
        return ctx
