"""타각 짝짓기 엔진 테스트.

Pairing engine tests — greedy matching, orphan exits, ordering, determinism.
The engine is pure, so these tests build detached punches without a DB.
"""

import random

from timeclock.models.justification import Justification
from timeclock.models.punch import PunchKind
from timeclock.services.pairing_service import pair

from tests.conftest import at, make_punch

ENTRY = PunchKind.ENTRY
EXIT = PunchKind.EXIT


class TestGreedyPairing:
    """탐욕적 짝짓기 정책."""

    def test_entry_and_exit_form_one_shift(self):
        entry = make_punch(ENTRY, at(8), punch_id="e1")
        exit_ = make_punch(EXIT, at(17), punch_id="x1")

        shifts = pair([exit_, entry])

        assert len(shifts) == 1
        assert shifts[0].entry is entry
        assert shifts[0].exit is exit_

    def test_greedy_policy_is_not_interval_optimal(self):
        """ENTRY 09:00, EXIT 09:30, ENTRY 10:00, EXIT 18:00 → (09:00,09:30), (10:00,18:00)."""
        e1 = make_punch(ENTRY, at(9), punch_id="e1")
        x1 = make_punch(EXIT, at(9, 30), punch_id="x1")
        e2 = make_punch(ENTRY, at(10), punch_id="e2")
        x2 = make_punch(EXIT, at(18), punch_id="x2")

        shifts = pair([x2, e2, x1, e1], ascending=True)

        assert [(s.entry.id, s.exit.id) for s in shifts] == [("e1", "x1"), ("e2", "x2")]

    def test_exit_must_be_strictly_after_entry(self):
        entry = make_punch(ENTRY, at(9), punch_id="e1")
        same_instant = make_punch(EXIT, at(9), punch_id="x1")

        shifts = pair([entry, same_instant], ascending=True)

        assert len(shifts) == 2
        assert shifts[0].entry is entry and shifts[0].exit is None
        assert shifts[1].is_orphan_exit

    def test_two_entries_without_exit_are_two_open_shifts(self):
        shifts = pair([make_punch(ENTRY, at(8)), make_punch(ENTRY, at(20))])

        assert len(shifts) == 2
        assert all(s.exit is None for s in shifts)

    def test_break_punches_are_ignored(self):
        punches = [
            make_punch(ENTRY, at(8), punch_id="e1"),
            make_punch(PunchKind.BREAK_OUT, at(12)),
            make_punch(PunchKind.BREAK_IN, at(13)),
            make_punch(EXIT, at(17), punch_id="x1"),
        ]

        shifts = pair(punches)

        assert len(shifts) == 1
        assert shifts[0].punch_count == 2

    def test_legacy_kinds_pair(self):
        entry = make_punch(ENTRY, at(8), punch_id="e1")
        entry.kind = "ENTRADA"
        exit_ = make_punch(EXIT, at(17), punch_id="x1")
        exit_.kind = "Saída"

        shifts = pair([entry, exit_])

        assert len(shifts) == 1
        assert shifts[0].entry is entry and shifts[0].exit is exit_

    def test_no_punches_no_shifts(self):
        assert pair([]) == []


class TestOrphanExits:
    """짝 없는 EXIT 노출."""

    def test_exit_before_any_entry_is_orphan(self):
        orphan = make_punch(EXIT, at(7), punch_id="x0")
        entry = make_punch(ENTRY, at(8), punch_id="e1")
        exit_ = make_punch(EXIT, at(17), punch_id="x1")

        shifts = pair([orphan, entry, exit_], ascending=True)

        assert len(shifts) == 2
        assert shifts[0].is_orphan_exit and shifts[0].exit is orphan
        assert shifts[0].effective_timestamp == at(7)
        assert shifts[1].entry is entry and shifts[1].exit is exit_

    def test_exits_are_never_shared_between_workers(self):
        entry_a = make_punch(ENTRY, at(8), worker_id="a")
        exit_b = make_punch(EXIT, at(17), worker_id="b")

        shifts = pair([entry_a, exit_b])

        assert len(shifts) == 2
        assert {s.worker_id for s in shifts} == {"a", "b"}
        assert all(s.punch_count == 1 for s in shifts)


class TestOrderingAndDeterminism:
    """정렬과 결정성."""

    def _punches(self):
        return [
            make_punch(ENTRY, at(8, day=1), worker_id="a", punch_id="a-e1"),
            make_punch(EXIT, at(16, day=1), worker_id="a", punch_id="a-x1"),
            make_punch(ENTRY, at(8, day=1), worker_id="b", punch_id="b-e1"),
            make_punch(EXIT, at(7, day=1), worker_id="b", punch_id="b-x0"),
            make_punch(ENTRY, at(7, day=3), worker_id="a", punch_id="a-e2"),
            make_punch(ENTRY, at(7, day=3), worker_id="a", punch_id="a-e3"),
        ]

    def test_newest_first_by_default(self):
        shifts = pair(self._punches())

        stamps = [s.effective_timestamp for s in shifts]
        assert stamps == sorted(stamps, reverse=True)

    def test_ascending_order(self):
        shifts = pair(self._punches(), ascending=True)

        assert [s.anchor.id for s in shifts] == ["b-x0", "a-e1", "b-e1", "a-e2", "a-e3"]

    def test_every_punch_appears_exactly_once(self):
        punches = self._punches()

        shifts = pair(punches)

        seen = [p.id for s in shifts for p in (s.entry, s.exit) if p is not None]
        assert sorted(seen) == sorted(p.id for p in punches)

    def test_input_order_does_not_matter(self):
        punches = self._punches()
        expected = [(s.worker_id, s.anchor.id, s.exit.id if s.exit else None) for s in pair(punches)]

        for seed in range(5):
            shuffled = list(punches)
            random.Random(seed).shuffle(shuffled)
            result = [(s.worker_id, s.anchor.id, s.exit.id if s.exit else None) for s in pair(shuffled)]
            assert result == expected

    def test_naive_timestamps_are_treated_as_utc(self):
        entry = make_punch(ENTRY, at(8).replace(tzinfo=None), punch_id="e1")
        exit_ = make_punch(EXIT, at(17), punch_id="x1")

        shifts = pair([entry, exit_])

        assert len(shifts) == 1
        assert shifts[0].exit is exit_


class TestJustificationAttachment:
    """근무에 소명 연결."""

    def test_justification_on_exit_is_attached(self):
        entry = make_punch(ENTRY, at(8), punch_id="e1")
        exit_ = make_punch(EXIT, at(17), punch_id="x1")
        justification = Justification(id="j1", worker_id="w1", linked_punch_id="x1", requested_at=at(18))

        shifts = pair([entry, exit_], [justification])

        assert shifts[0].justification is justification

    def test_latest_request_wins(self):
        entry = make_punch(ENTRY, at(8), punch_id="e1")
        older = Justification(id="j1", worker_id="w1", linked_punch_id="e1", requested_at=at(9))
        newer = Justification(id="j2", worker_id="w1", linked_punch_id="e1", requested_at=at(10))

        shifts = pair([entry], [newer, older])

        assert shifts[0].justification is newer
