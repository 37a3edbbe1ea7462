"""근무 상태 판정기 — Status Resolver.

Derives one display status for a Shift from the independently evolving
statuses of its entry, its exit and their approval stamps. First match wins:

    1. either side REJECTED               -> Rejected (rejecter + reason, exit's fields first)
    2. a MANUAL side, nothing approved    -> Pending
    3. either side PENDING                -> Pending
    4. exit present, both sides closed    -> Closed (approver, exit's first)
    5. otherwise                          -> Open

Rejection and pending always take precedence over a stale "closed" on the
other side. Never raises; legacy status strings are read through the
normalization table.
"""

import enum
from dataclasses import dataclass

from timeclock.models.punch import PunchRecord, PunchStatus
from timeclock.services.pairing_service import Shift
from timeclock.utils.status_map import normalize_punch_status

# 거절자 미기록 시 표시 이름 — Shown when a rejection carries no rejecter
DEFAULT_REJECTER: str = "Manager"


class ShiftLabel(str, enum.Enum):
    """근무 표시 상태 — Shift display label."""

    OPEN = "Open"
    PENDING = "Pending"
    CLOSED = "Closed"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class ShiftStatus:
    """판정 결과 — Resolved label plus optional human-readable detail."""

    label: ShiftLabel
    detail: str | None = None


def _status(punch: PunchRecord) -> PunchStatus:
    return normalize_punch_status(punch.status)


def _is_approved(punch: PunchRecord) -> bool:
    return _status(punch) == PunchStatus.CLOSED and bool(punch.approved_by)


def _rejection_detail(sides: list[PunchRecord]) -> str:
    # sides는 EXIT 우선 순서 — sides are ordered exit first
    source = next((p for p in sides if p.rejected_by or p.rejection_reason), None)
    if source is None:
        return DEFAULT_REJECTER
    who = source.rejected_by or DEFAULT_REJECTER
    return f"{who} - {source.rejection_reason}" if source.rejection_reason else who


def resolve_status(shift: Shift) -> ShiftStatus:
    """근무의 표시 상태를 판정합니다.

    Resolve the display status of a shift.

    Args:
        shift: 짝지어진 근무 (Shift produced by the pairing engine)

    Returns:
        ShiftStatus: 표시 상태와 상세 (Label and detail)
    """
    sides: list[PunchRecord] = [p for p in (shift.exit, shift.entry) if p is not None]
    if not sides:
        return ShiftStatus(ShiftLabel.OPEN)

    statuses: list[PunchStatus] = [_status(p) for p in sides]

    if PunchStatus.REJECTED in statuses:
        return ShiftStatus(ShiftLabel.REJECTED, _rejection_detail(sides))

    if any(p.is_manual for p in sides) and not any(_is_approved(p) for p in sides):
        return ShiftStatus(ShiftLabel.PENDING)

    if PunchStatus.PENDING in statuses:
        return ShiftStatus(ShiftLabel.PENDING)

    if shift.exit is not None and shift.entry is not None:
        # 양쪽이 모두 있으면 OPEN도 닫힌 것으로 간주 — a present counterpart closes an OPEN side
        if all(s in (PunchStatus.CLOSED, PunchStatus.OPEN) for s in statuses):
            approver = shift.exit.approved_by or shift.entry.approved_by
            return ShiftStatus(ShiftLabel.CLOSED, approver)

    return ShiftStatus(ShiftLabel.OPEN)
