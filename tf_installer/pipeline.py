from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .artifacts import ArtifactDefinition
from .decision import InstallAction
from .lib.download import Downloader, scratch_workspace
from .lib.environment import EnvironmentMutator
from .lib.placement import InstallTarget, PlacementResult
from .lib.probe import VersionProbe
from .lib.registry import ArtifactRegistry, DownloadDescriptor
from .lib.versions import VersionSpec

logger = logging.getLogger(__name__)


@dataclass
class InstallContext:
    """Inputs of one install run plus everything the steps work out along the way."""

    artifact: ArtifactDefinition
    spec: VersionSpec
    install_root: Path
    os_name: str
    arch: str
    registry: ArtifactRegistry
    http: Downloader
    environment: EnvironmentMutator
    probe_factory: Callable[[InstallTarget], VersionProbe]
    force: bool = False
    dry_run: bool = False
    allow_prerelease: bool = False
    scratch_parent: Optional[str] = None

    version: Optional[str] = None
    target: Optional[InstallTarget] = None
    installed_version: Optional[str] = None
    action: Optional[InstallAction] = None
    descriptor: Optional[DownloadDescriptor] = None
    archive: Optional[Path] = None
    scratch: Optional[Path] = None
    placement: Optional[PlacementResult] = None
    halted: Optional[str] = None
    current_step: Optional[str] = None

    _resources: Optional[ExitStack] = field(default=None, repr=False)

    def halt(self, reason: str) -> None:
        self.halted = reason

    def open_scratch(self) -> Path:
        """Scratch dir for this run; removed when the pipeline exits, however it exits."""

        if self.scratch is None:
            if self._resources is None:
                raise RuntimeError("scratch requested outside of run_pipeline()")
            self.scratch = self._resources.enter_context(scratch_workspace(self.scratch_parent))
        return self.scratch


class Step(Protocol):
    """A single pipeline step. Mutating steps are not run in dry-run mode."""

    step_id: str
    mutating: bool

    def run(self, ctx: InstallContext) -> InstallContext:
        ...


@dataclass(frozen=True)
class PipelineResult:
    context: InstallContext
    ran_steps: List[str]
    skipped_steps: List[str]

    def outcome(self) -> Dict[str, Any]:
        ctx = self.context
        placed = ctx.placement.path if ctx.placement else (ctx.target.binary_path if ctx.target else None)
        return {
            "artifact": ctx.artifact.name,
            "requested": ctx.spec.raw,
            "version": ctx.version,
            "installed_before": ctx.installed_version,
            "action": ctx.action.value if ctx.action else None,
            "path": str(placed) if placed else None,
            "path_entry": str(ctx.target.directory) if ctx.target and ctx.artifact.on_path else None,
            "dry_run": ctx.dry_run,
            "halted": ctx.halted,
            "ran_steps": list(self.ran_steps),
            "skipped_steps": list(self.skipped_steps),
        }


def run_pipeline(*, ctx: InstallContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order until one halts the run; dry-run stops before mutations."""

    ran: List[str] = []
    skipped: List[str] = []

    with ExitStack() as stack:
        ctx._resources = stack
        try:
            for step in steps:
                if ctx.halted is not None:
                    skipped.append(step.step_id)
                    continue

                if ctx.dry_run and step.mutating:
                    logger.info("Dry run: would run step %s", step.step_id)
                    skipped.append(step.step_id)
                    continue

                ctx.current_step = step.step_id
                logger.info("Running step %s", step.step_id)
                ctx = step.run(ctx)
                ran.append(step.step_id)

            ctx.current_step = None
        finally:
            ctx._resources = None
            ctx.scratch = None
            ctx.archive = None

    return PipelineResult(context=ctx, ran_steps=ran, skipped_steps=skipped)
