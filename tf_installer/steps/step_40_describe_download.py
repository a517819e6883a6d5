from __future__ import annotations

import logging

from ..pipeline import InstallContext

logger = logging.getLogger(__name__)


class DescribeDownloadStep:
    step_id = "40_describe_download"
    mutating = False

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.version is None:
            raise RuntimeError("resolved version missing; run resolve step first")

        ctx.descriptor = ctx.registry.describe(ctx.version, ctx.os_name, ctx.arch)
        logger.info("Archive: %s", ctx.descriptor.archive_url)
        logger.info("Checksums: %s", ctx.descriptor.shasums_url)
        if ctx.dry_run and ctx.target is not None:
            logger.info("Dry run: would install %s to %s", ctx.descriptor.filename, str(ctx.target.binary_path))
        return ctx
