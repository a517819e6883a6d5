from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, Optional

import yaml

from .artifacts import ARTIFACTS, get_artifact
from .config import load_config
from .errors import InstallerError
from .lib.environment import EnvironmentMutator, NoopEnvironment, ProcessPathEnvironment
from .lib.placement import InstallTarget
from .lib.probe import VersionProbe
from .lib.registry import ArtifactRegistry, HttpClient
from .lib.versions import VersionSpec
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import InstallContext, run_pipeline
from .state_store import ensure_defaults, load_state, record_error, record_receipt, save_state, set_aside_state
from .steps import (
    ConfigureEnvironmentStep,
    DecideStep,
    DescribeDownloadStep,
    DownloadVerifyStep,
    PlaceBinaryStep,
    ProbeInstalledStep,
    ResolveVersionStep,
    VerifyInstallStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "~/.tf-installer/state.json"


def build_steps():
    return [
        ResolveVersionStep(),
        ProbeInstalledStep(),
        DecideStep(),
        DescribeDownloadStep(),
        DownloadVerifyStep(),
        PlaceBinaryStep(),
        VerifyInstallStep(),
        ConfigureEnvironmentStep(),
    ]


def _load_receipts(state_path: str) -> Dict[str, Any]:
    """Receipts are history only, so an unreadable state file never blocks an install."""

    try:
        return ensure_defaults(load_state(state_path))
    except (ValueError, yaml.YAMLError) as e:
        aside = set_aside_state(state_path)
        logger.warning("State file %s is unreadable (%s); moved to %s and starting afresh", state_path, e, str(aside))
        return ensure_defaults({})


def run(
    *,
    artifact: str,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    version: Optional[str] = None,
    install_root: Optional[str] = None,
    os_name: Optional[str] = None,
    arch: Optional[str] = None,
    force: bool = False,
    dry_run: bool = False,
    verbose: bool = False,
    http: Optional[HttpClient] = None,
    registry: Optional[ArtifactRegistry] = None,
    environment: Optional[EnvironmentMutator] = None,
    probe_factory: Optional[Callable[[InstallTarget], VersionProbe]] = None,
    scratch_parent: Optional[str] = None,
) -> Dict[str, Any]:
    """Install one artifact and return the outcome (also recorded in the state file).

    ``http``, ``registry``, ``environment`` and ``probe_factory`` default to
    the real implementations; they are parameters so callers can substitute them.
    A dry run logs to the console only and writes neither log nor state file.
    """

    actual_log_path = configure_logging(
        log_path=None if dry_run else log_path,
        level=logging.DEBUG if verbose else logging.INFO,
    )

    state: Optional[Dict[str, Any]] = None
    if not dry_run:
        state = _load_receipts(state_path)
        state["log_path"] = actual_log_path

    definition = get_artifact(artifact)
    ctx: Optional[InstallContext] = None

    try:
        cfg = load_config(config_path).with_overrides(install_root=install_root, os=os_name, arch=arch)
        spec = VersionSpec.parse(version or definition.requested_version(cfg))

        http = http or HttpClient(timeout=cfg.http_timeout)
        if environment is None:
            environment = ProcessPathEnvironment() if definition.on_path else NoopEnvironment()

        ctx = InstallContext(
            artifact=definition,
            spec=spec,
            install_root=cfg.install_root,
            os_name=cfg.os_name,
            arch=cfg.arch,
            registry=registry or definition.make_registry(cfg, http),
            http=http,
            environment=environment,
            probe_factory=probe_factory or definition.make_probe,
            force=force,
            dry_run=dry_run,
            allow_prerelease=cfg.allow_prerelease,
            scratch_parent=scratch_parent,
        )

        result = run_pipeline(ctx=ctx, steps=build_steps())
        outcome = result.outcome()
        if state is not None:
            record_receipt(state, outcome)
        logger.info(
            "%s %s: %s (%s)",
            definition.display_name,
            outcome["version"],
            outcome["halted"] or ("dry run" if dry_run else "installed"),
            outcome["path"],
        )
        return outcome
    except Exception as e:
        logger.exception("%s install failed", definition.display_name)
        if state is not None:
            record_error(state, artifact=definition.name, step=ctx.current_step if ctx else None, error=str(e))
        raise
    finally:
        if state is not None:
            save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="tf-installer")
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to install receipts (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")

    sub = p.add_subparsers(dest="artifact", required=True)
    for name, definition in ARTIFACTS.items():
        sp = sub.add_parser(name, help=f"Install {definition.display_name}")
        sp.add_argument("--version", default=None, help="Version to install (X.Y.Z or 'latest')")
        sp.add_argument("--install-root", default=None, help="Root directory for versioned installs")
        sp.add_argument("--os", dest="os_name", default=None, help="Target OS (default: this host)")
        sp.add_argument("--arch", default=None, help="Target architecture (default: this host)")
        sp.add_argument("--force", action="store_true", help="Reinstall even if already present")
        sp.add_argument("--dry-run", action="store_true", help="Report what would happen; change nothing")

    args = p.parse_args(argv)

    try:
        outcome = run(
            artifact=args.artifact,
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            version=args.version,
            install_root=args.install_root,
            os_name=args.os_name,
            arch=args.arch,
            force=bool(args.force),
            dry_run=bool(args.dry_run),
            verbose=bool(args.verbose),
        )
    except InstallerError:
        # Already logged with traceback by run().
        return 1

    print(f"{outcome['artifact']} {outcome['version']} {outcome['path']}")
    # PATH was only changed for this process; the user's shell needs it too.
    if outcome.get("path_entry"):
        print(f"add to PATH: {outcome['path_entry']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
