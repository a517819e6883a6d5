from __future__ import annotations

import platform

# Segment names as used by releases.hashicorp.com and registry.terraform.io.
SUPPORTED_OS = ("windows", "linux", "darwin", "freebsd")


def normalize_arch(machine: str) -> str:
    m = machine.lower()
    return {
        "x86_64": "amd64",
        "amd64": "amd64",
        "x64": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "arm",
        "armv6l": "arm",
        "i386": "386",
        "i686": "386",
        "x86": "386",
    }.get(m, m)


def normalize_os(system: str) -> str:
    s = system.lower()
    if s.startswith("win") or s.startswith("cygwin") or s.startswith("msys"):
        return "windows"
    return {"macos": "darwin", "osx": "darwin"}.get(s, s)


def detect_os() -> str:
    return normalize_os(platform.system())


def detect_arch() -> str:
    return normalize_arch(platform.machine())


def exe_suffix(os_name: str) -> str:
    return ".exe" if os_name == "windows" else ""
