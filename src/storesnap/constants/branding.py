"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "storesnap"
CLI_DESCRIPTION: str = "\n".join(
    (
        ">_ storesnap",
        "     // Nix store snapshots for CI caches",
        "",
        "Restore a store snapshot at job start and save the job's working set at job end.",
    )
)
