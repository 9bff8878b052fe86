"""Audit log and manual overrides of proration values.

Every deviation from a calculated avos / notice-days value goes through
``resolve_adjustable``, which records a MANUAL entry with the before/after
values and the justification. There is no other override path.
"""

import logging
from datetime import datetime
from typing import Optional

from .schemas import Adjustable, LogEntry, LogKind

logger = logging.getLogger(__name__)

JUSTIFICATION_MISSING = "Não informada"


class AuditLog:
    """Append-only audit log owned by a single settlement calculation.

    The entries leave the calculation only as the immutable tuple returned
    by ``entries()``.
    """

    def __init__(self):
        self._entries: list[LogEntry] = []

    def add(self, kind: LogKind, message: str) -> None:
        self._entries.append(LogEntry(timestamp=datetime.now(), kind=kind, message=message))
        if kind == "AVISO":
            logger.warning(message)
        else:
            logger.debug(f"[{kind}] {message}")

    def info(self, message: str) -> None:
        self.add("INFO", message)

    def warn(self, message: str) -> None:
        self.add("AVISO", message)

    def manual(self, message: str) -> None:
        self.add("MANUAL", message)

    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def resolve_adjustable(
    adjustable: Optional[Adjustable],
    default: int,
    label: str,
    log: AuditLog,
    suffix: str = "",
) -> int:
    """Pick the value to use for an adjustable quantity.

    Args:
        adjustable: Calculated/edited/justification triple (None = not supplied)
        default: Value the engine calculated itself
        label: Text for the log, e.g. "Avos de férias"
        log: Audit log of the current calculation
        suffix: Unit appended to values in the log, e.g. "/12"

    Returns:
        The edited value when it differs from the calculated one,
        otherwise ``default``
    """
    if adjustable is None or not adjustable.is_overridden:
        return default

    justification = (adjustable.justification or "").strip() or JUSTIFICATION_MISSING
    log.manual(
        f"{label} alterado de {adjustable.calculated}{suffix} para "
        f"{adjustable.edited}{suffix}. Justificativa: {justification}"
    )
    return adjustable.edited
