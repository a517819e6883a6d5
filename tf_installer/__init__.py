"""Terraform / Databricks provider installer.

Core design goals:
- Idempotent: an installed, matching version is never re-downloaded
- Verified: every archive is checked against its SHA256SUMS manifest
- Side-by-side versioned install layout
- Injected environment and probe capabilities (testable without a real machine)
- Centralized logging
"""

__all__ = []
