from __future__ import annotations

from ..lib.download import download_and_verify
from ..pipeline import InstallContext


class DownloadVerifyStep:
    step_id = "50_download_verify"
    mutating = True

    def run(self, ctx: InstallContext) -> InstallContext:
        if ctx.descriptor is None:
            raise RuntimeError("download descriptor missing; run describe step first")

        ctx.archive = download_and_verify(ctx.descriptor, ctx.http, ctx.open_scratch())
        return ctx
