"""타각 짝짓기 엔진 — 원시 타각 스트림에서 근무(Shift) 도출.

Pairing Engine — derives Shift views from an unordered stream of punches.

Policy (kept exactly for compatibility with historical reports):
    per worker, ENTRYs in chronological order each claim the earliest
    not-yet-claimed EXIT strictly after them. This is a single greedy
    left-to-right pass, not an interval-optimal matching. ENTRYs with no
    exit become open shifts; EXITs left unclaimed become orphan-exit shifts.

The engine is pure: no I/O, no mutation of its inputs, deterministic for a
given input (timestamp ties are broken by punch id).
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Sequence

from timeclock.models.justification import Justification
from timeclock.models.punch import PunchKind, PunchRecord
from timeclock.utils.clock import as_utc, utc_date
from timeclock.utils.status_map import normalize_punch_kind

_EPOCH: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class Shift:
    """근무 뷰 — 최대 한 개의 ENTRY와 한 개의 EXIT (저장되지 않음).

    Derived, never persisted view pairing at most one ENTRY with one EXIT
    for the same worker. At least one side is always present.

    Attributes:
        worker_id: 작업자 ID (Worker id)
        worker_name: 작업자 이름 (Display name taken from the punches)
        entry: ENTRY 타각, 없으면 None (Entry punch or None for an orphan exit)
        exit: EXIT 타각, 없으면 None (Exit punch or None for an open shift)
        justification: 어느 한쪽을 대상으로 하는 소명 (Justification governing either side)
    """

    worker_id: str
    worker_name: str
    entry: PunchRecord | None = None
    exit: PunchRecord | None = None
    justification: Justification | None = None

    @property
    def anchor(self) -> PunchRecord:
        """기준 타각 — entry if present, else exit."""
        return self.entry if self.entry is not None else self.exit  # type: ignore[return-value]

    @property
    def effective_timestamp(self) -> datetime:
        return as_utc(self.anchor.timestamp)

    @property
    def date(self) -> date:
        return utc_date(self.anchor.timestamp)

    @property
    def location_id(self) -> str | None:
        if self.entry is not None and self.entry.location_id:
            return self.entry.location_id
        return self.exit.location_id if self.exit is not None else None

    @property
    def sector_id(self) -> str | None:
        if self.entry is not None and self.entry.sector_id:
            return self.entry.sector_id
        return self.exit.sector_id if self.exit is not None else None

    @property
    def location_label(self) -> str | None:
        if self.entry is not None and self.entry.location_label:
            return self.entry.location_label
        return self.exit.location_label if self.exit is not None else None

    @property
    def is_orphan_exit(self) -> bool:
        return self.entry is None and self.exit is not None

    @property
    def punch_count(self) -> int:
        return int(self.entry is not None) + int(self.exit is not None)


def _order_key(punch: PunchRecord) -> tuple[datetime, str]:
    return as_utc(punch.timestamp), punch.id


def _shift_key(shift: Shift) -> tuple[datetime, str, str]:
    return shift.effective_timestamp, shift.worker_id, shift.anchor.id


def _index_justifications(justifications: Iterable[Justification]) -> dict[str, Justification]:
    """대상 타각 ID → 소명, 최신 요청 우선 — latest request wins per linked punch."""
    index: dict[str, Justification] = {}
    ordered = sorted(
        (j for j in justifications if j.linked_punch_id),
        key=lambda j: (as_utc(j.requested_at) if j.requested_at else _EPOCH, j.id),
    )
    for justification in ordered:
        index[justification.linked_punch_id] = justification  # type: ignore[index]
    return index


def _pair_worker(worker_id: str, punches: Sequence[PunchRecord]) -> list[Shift]:
    entries: list[PunchRecord] = sorted(
        (p for p in punches if normalize_punch_kind(p.kind) == PunchKind.ENTRY), key=_order_key
    )
    exits: list[PunchRecord] = sorted(
        (p for p in punches if normalize_punch_kind(p.kind) == PunchKind.EXIT), key=_order_key
    )
    worker_name: str = next((p.worker_name for p in punches if p.worker_name), "")

    shifts: list[Shift] = []
    claimed: set[int] = set()

    for entry in entries:
        entry_ts = as_utc(entry.timestamp)
        match: int | None = None
        for index, candidate in enumerate(exits):
            if index in claimed:
                continue
            if as_utc(candidate.timestamp) > entry_ts:
                match = index
                break

        if match is None:
            shifts.append(Shift(worker_id=worker_id, worker_name=worker_name, entry=entry))
        else:
            claimed.add(match)
            shifts.append(Shift(worker_id=worker_id, worker_name=worker_name, entry=entry, exit=exits[match]))

    # 짝 없는 EXIT — orphan exits signal a missing entry and are always surfaced
    for index, orphan in enumerate(exits):
        if index not in claimed:
            shifts.append(Shift(worker_id=worker_id, worker_name=worker_name, exit=orphan))

    return shifts


def pair(
    punches: Iterable[PunchRecord],
    justifications: Iterable[Justification] = (),
    ascending: bool = False,
) -> list[Shift]:
    """타각 목록을 근무 목록으로 짝짓습니다.

    Pair punches into shifts.

    Args:
        punches: 범위 내 타각 (Punches for the query scope; any order, any workers)
        justifications: 해당 타각들을 대상으로 하는 소명 (Justifications to attach)
        ascending: True면 오래된 순 (Oldest first; default is newest first)

    Returns:
        list[Shift]: 기준 시각으로 정렬된 근무 목록
                     (Shifts ordered by effective timestamp, then worker id, then punch id)
    """
    by_worker: dict[str, list[PunchRecord]] = defaultdict(list)
    for punch in punches:
        by_worker[punch.worker_id].append(punch)

    shifts: list[Shift] = []
    for worker_id in sorted(by_worker):
        shifts.extend(_pair_worker(worker_id, by_worker[worker_id]))

    index = _index_justifications(justifications)
    for shift in shifts:
        linked: Justification | None = None
        if shift.exit is not None:
            linked = index.get(shift.exit.id)
        if linked is None and shift.entry is not None:
            linked = index.get(shift.entry.id)
        shift.justification = linked

    shifts.sort(key=_shift_key, reverse=not ascending)
    return shifts
