from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import DisplayInfo
from .strategies import IDENTITY_MATRIX, CommandRunner


logger = logging.getLogger(__name__)

# Most targeted undo first, full mode renegotiation last.
RESET_STEPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("identity transform", ("--transform", IDENTITY_MATRIX)),
    ("zero panning", ("--panning", "0x0")),
    ("zero position", ("--pos", "0x0")),
    ("auto mode", ("--auto",)),
)


@dataclass(frozen=True)
class ResetOutcome:
    success: bool
    attempts: int
    message: str


def reset_display(runner: CommandRunner, display: DisplayInfo) -> ResetOutcome:
    errors: list[str] = []
    for attempt, (label, step_args) in enumerate(RESET_STEPS, start=1):
        result = runner.execute(["--output", display.name, *step_args])
        if result.success:
            logger.info("Reset %s via %s", display.name, label)
            return ResetOutcome(
                success=True,
                attempts=attempt,
                message=f"SUCCESS: {display.name} RESET via {label}.",
            )
        detail = result.stderr.strip() or "unknown error"
        logger.debug("Reset step %s failed for %s: %s", label, display.name, detail)
        errors.append(f"{label}: {detail}")

    message = (
        f"RESET FAILED: {display.name} could not be restored "
        f"({'; '.join(errors)}). Reset the display manually."
    )
    logger.error(message)
    return ResetOutcome(success=False, attempts=len(RESET_STEPS), message=message)
