from __future__ import annotations

import logging

from ..errors import PlacementError
from ..pipeline import InstallContext

logger = logging.getLogger(__name__)


class VerifyInstallStep:
    step_id = "70_verify_install"
    mutating = True

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.target is None:
            raise RuntimeError("install target missing")

        found = ctx.probe_factory(ctx.target).query_version()
        if found != ctx.version:
            hint = ""
            if ctx.placement is not None and ctx.placement.already_present:
                hint = " (existing binary was kept; re-run with --force)"
            raise PlacementError(
                f"{ctx.artifact.display_name} at {ctx.target.binary_path} reports version {found!r}, "
                f"expected {ctx.version!r}{hint}"
            )
        logger.info("Verified %s %s at %s", ctx.artifact.display_name, found, str(ctx.target.binary_path))
        return ctx
