"""Gate for mutating tool calls."""

from dataclasses import dataclass
from typing import Optional

CONFIRM_MARKER = "YES"

DISABLED_REASON = "Destructive operations disabled. Set ALLOW_DESTRUCTIVE=true to enable."
CONFIRM_REASON = f'Confirmation required: set confirm="{CONFIRM_MARKER}" to proceed.'


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    reason: Optional[str] = None


def allow_destructive(confirm: Optional[str], dry_run: Optional[bool], enabled: bool) -> GuardDecision:
    """Decide whether a mutating call may proceed

    Dry runs are always allowed since they never send the request. Otherwise
    the process-wide flag must be on and the caller must pass the marker.
    """
    if dry_run:
        return GuardDecision(True)
    if not enabled:
        return GuardDecision(False, DISABLED_REASON)
    if confirm != CONFIRM_MARKER:
        return GuardDecision(False, CONFIRM_REASON)
    return GuardDecision(True)


__all__ = [
    "CONFIRM_MARKER",
    "GuardDecision",
    "allow_destructive",
]
