from __future__ import annotations

from ..lib.placement import place_archive
from ..pipeline import InstallContext


class PlaceBinaryStep:
    step_id = "60_place_binary"
    mutating = True

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.archive is None or ctx.target is None:
            raise RuntimeError("verified archive missing; run download step first")

        ctx.placement = place_archive(
            ctx.archive,
            ctx.target,
            member_prefix=ctx.artifact.member_prefix,
            staging_dir=ctx.open_scratch() / "extract",
            force=ctx.force,
        )
        return ctx
