"""HTTP API 테스트.

HTTP API tests — Kiosk punches, worker shifts and justifications under
/api/v1/app/, and manager review, punches and maintenance under /api/v1/admin/.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.directory import Location, Sector, Worker
from timeclock.models.punch import PunchKind

from tests.conftest import add_punch, at, auth_header

APP = "/api/v1/app"
ADMIN = "/api/v1/admin"


async def _submit_missing_shift(client: AsyncClient, token: str) -> dict:
    res = await client.post(f"{APP}/my/justifications/missing-shift", json={
        "entry_at": at(8).isoformat(),
        "exit_at": at(17).isoformat(),
        "reason": "FORGOT",
    }, headers=auth_header(token))
    assert res.status_code == 201
    return res.json()


# ===== Auth =====

class TestAuth:
    """인증/권한 테스트."""

    async def test_missing_token(self, client: AsyncClient):
        res = await client.get(f"{APP}/my/shifts")
        assert res.status_code == 401

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{APP}/my/shifts", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_worker_cannot_use_admin_routes(self, client: AsyncClient, worker_token):
        res = await client.get(f"{ADMIN}/shifts", headers=auth_header(worker_token))
        assert res.status_code == 403

    async def test_kiosk_cannot_list_shifts(self, client: AsyncClient, kiosk_token):
        res = await client.get(f"{APP}/my/shifts", headers=auth_header(kiosk_token))
        assert res.status_code == 403

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200


# ===== Kiosk punches & shifts =====

class TestKioskFlow:
    """키오스크 타각 → 근무 조회."""

    async def test_kiosk_punches_form_closed_shift(self, client: AsyncClient, kiosk_token, worker_token):
        for kind, hour in (("ENTRY", 8), ("EXIT", 17)):
            res = await client.post(f"{APP}/punches", json={
                "kind": kind,
                "worker_id": "w1",
                "worker_name": "Worker w1",
                "timestamp": at(hour).isoformat(),
            }, headers=auth_header(kiosk_token))
            assert res.status_code == 201

        res = await client.get(f"{APP}/my/shifts", headers=auth_header(worker_token))
        assert res.status_code == 200
        shifts = res.json()
        assert len(shifts) == 1
        assert shifts[0]["status"] == "Closed"
        assert shifts[0]["entry"]["kind"] == "ENTRY"
        assert shifts[0]["exit"]["pair_ref"] == shifts[0]["entry"]["id"]

    async def test_kiosk_punch_requires_worker(self, client: AsyncClient, kiosk_token):
        res = await client.post(f"{APP}/punches", json={"kind": "ENTRY"}, headers=auth_header(kiosk_token))
        assert res.status_code == 422

    async def test_worker_punches_for_itself(self, client: AsyncClient, worker_token):
        res = await client.post(f"{APP}/punches", json={
            "kind": "ENTRY",
            "worker_id": "w2",
        }, headers=auth_header(worker_token))
        assert res.status_code == 201
        data = res.json()
        assert data["worker_id"] == "w1"
        assert data["status"] == "OPEN"

    async def test_worker_sees_only_own_shifts(
        self, client: AsyncClient, db: AsyncSession, worker_token, other_worker_token
    ):
        await add_punch(db, PunchKind.ENTRY, at(8), worker_id="w1")
        await add_punch(db, PunchKind.ENTRY, at(9), worker_id="w2")
        await db.commit()

        res = await client.get(f"{APP}/my/shifts", headers=auth_header(other_worker_token))
        assert res.status_code == 200
        assert [s["worker_id"] for s in res.json()] == ["w2"]


# ===== Manager shift listing =====

class TestAdminShifts:
    """관리자 근무 목록 테스트."""

    async def test_names_and_filters(self, client: AsyncClient, db: AsyncSession, manager_token):
        db.add(Worker(id="w1", name="Maria"))
        db.add(Location(id="loc-1", name="Hospital Central", slug="central"))
        db.add(Sector(id="icu", location_id="loc-1", name="ICU"))
        await add_punch(db, PunchKind.ENTRY, at(8), worker_id="w1", location_id="loc-1", sector_id="icu")
        await add_punch(db, PunchKind.ENTRY, at(8, day=12), worker_id="w2", location_label="Ward 3")
        await db.commit()

        res = await client.get(f"{ADMIN}/shifts", headers=auth_header(manager_token))
        assert res.status_code == 200
        shifts = res.json()
        assert [s["worker_id"] for s in shifts] == ["w2", "w1"]
        assert shifts[0]["location_name"] == "Ward 3"
        assert shifts[1]["worker_name"] == "Maria"
        assert shifts[1]["location_name"] == "Hospital Central"
        assert shifts[1]["sector_name"] == "ICU"
        assert shifts[1]["status"] == "Open"

        res = await client.get(f"{ADMIN}/shifts", params={"sector_id": "icu"}, headers=auth_header(manager_token))
        assert [s["worker_id"] for s in res.json()] == ["w1"]

        res = await client.get(f"{ADMIN}/shifts", params={
            "date_from": "2026-03-11", "order": "asc",
        }, headers=auth_header(manager_token))
        assert [s["worker_id"] for s in res.json()] == ["w2"]


# ===== Justifications =====

class TestJustificationFlow:
    """소명 제출 → 승인/거절."""

    async def test_missing_shift_is_pending(self, client: AsyncClient, worker_token):
        justification = await _submit_missing_shift(client, worker_token)
        assert justification["status"] == "PENDING"

        res = await client.get(f"{APP}/my/shifts", headers=auth_header(worker_token))
        shifts = res.json()
        assert len(shifts) == 1
        assert shifts[0]["status"] == "Pending"
        assert shifts[0]["justification_id"] == justification["id"]

    async def test_other_reason_without_description(self, client: AsyncClient, worker_token):
        res = await client.post(f"{APP}/my/justifications/missing-shift", json={
            "entry_at": at(8).isoformat(),
            "exit_at": at(17).isoformat(),
            "reason": "OTHER",
        }, headers=auth_header(worker_token))
        assert res.status_code == 422

    async def test_missing_exit_for_another_worker(
        self, client: AsyncClient, db: AsyncSession, other_worker_token
    ):
        entry = await add_punch(db, PunchKind.ENTRY, at(8), worker_id="w1")
        await db.commit()

        res = await client.post(f"{APP}/my/justifications/missing-exit", json={
            "entry_id": entry.id,
            "exit_at": at(17).isoformat(),
            "reason": "FORGOT",
        }, headers=auth_header(other_worker_token))
        assert res.status_code == 403

    async def test_manager_lists_pending(self, client: AsyncClient, worker_token, manager_token):
        justification = await _submit_missing_shift(client, worker_token)

        res = await client.get(f"{ADMIN}/justifications", headers=auth_header(manager_token))
        assert res.status_code == 200
        assert [j["id"] for j in res.json()] == [justification["id"]]

    async def test_approve(self, client: AsyncClient, worker_token, manager_token):
        justification = await _submit_missing_shift(client, worker_token)

        res = await client.post(
            f"{ADMIN}/justifications/{justification['id']}/approve", headers=auth_header(manager_token)
        )
        assert res.status_code == 200
        assert res.json()["status"] == "APPROVED"
        assert res.json()["decided_by"] == "Dr. Ana"

        shifts = (await client.get(f"{APP}/my/shifts", headers=auth_header(worker_token))).json()
        assert shifts[0]["status"] == "Closed"
        assert shifts[0]["status_detail"] == "Dr. Ana"

        res = await client.get(f"{ADMIN}/justifications", headers=auth_header(manager_token))
        assert res.json() == []

    async def test_reject_requires_reason(self, client: AsyncClient, worker_token, manager_token):
        justification = await _submit_missing_shift(client, worker_token)

        res = await client.post(
            f"{ADMIN}/justifications/{justification['id']}/reject",
            json={"reason": " "},
            headers=auth_header(manager_token),
        )
        assert res.status_code == 422

    async def test_reject(self, client: AsyncClient, worker_token, manager_token):
        justification = await _submit_missing_shift(client, worker_token)

        res = await client.post(
            f"{ADMIN}/justifications/{justification['id']}/reject",
            json={"reason": "no record at the gate"},
            headers=auth_header(manager_token),
        )
        assert res.status_code == 200
        assert res.json()["status"] == "REJECTED"

        shifts = (await client.get(f"{APP}/my/shifts", headers=auth_header(worker_token))).json()
        assert shifts[0]["status"] == "Rejected"
        assert shifts[0]["status_detail"] == "Dr. Ana - no record at the gate"

        res = await client.get(
            f"{APP}/my/justifications", params={"status": "REJECTED"}, headers=auth_header(worker_token)
        )
        assert [j["id"] for j in res.json()] == [justification["id"]]

    async def test_unknown_justification(self, client: AsyncClient, manager_token):
        res = await client.post(f"{ADMIN}/justifications/nope/approve", headers=auth_header(manager_token))
        assert res.status_code == 404


# ===== Manager punches =====

class TestAdminPunches:
    """관리자 타각 관리."""

    async def test_manual_punch_and_exit(self, client: AsyncClient, manager_token):
        res = await client.post(f"{ADMIN}/punches", json={
            "worker_id": "w1",
            "worker_name": "Worker w1",
            "kind": "ENTRY",
            "timestamp": at(8).isoformat(),
        }, headers=auth_header(manager_token))
        assert res.status_code == 201
        entry = res.json()
        assert entry["origin"] == "MANUAL"
        assert entry["status"] == "PENDING"

        res = await client.post(f"{ADMIN}/punches/{entry['id']}/exit", json={
            "timestamp": at(17).isoformat(),
        }, headers=auth_header(manager_token))
        assert res.status_code == 201
        assert res.json()["pair_ref"] == entry["id"]

        res = await client.post(f"{ADMIN}/punches/{entry['id']}/exit", json={
            "timestamp": at(18).isoformat(),
        }, headers=auth_header(manager_token))
        assert res.status_code == 409

    async def test_delete(self, client: AsyncClient, db: AsyncSession, manager_token):
        punch = await add_punch(db, PunchKind.ENTRY, at(8))
        await db.commit()

        res = await client.delete(f"{ADMIN}/punches/{punch.id}", headers=auth_header(manager_token))
        assert res.status_code == 204

        res = await client.delete(f"{ADMIN}/punches/{punch.id}", headers=auth_header(manager_token))
        assert res.status_code == 404


# ===== Maintenance =====

class TestMaintenance:
    """일관성 스윕 엔드포인트."""

    async def test_sweep(self, client: AsyncClient, db: AsyncSession, manager_token):
        await add_punch(db, PunchKind.ENTRY, at(8), worker_id="ghost", status="Aberto")
        await db.commit()

        res = await client.post(f"{ADMIN}/maintenance/sweep", headers=auth_header(manager_token))
        assert res.status_code == 200
        data = res.json()
        assert data["counts"]["punch_statuses_normalized"] == 1
        assert data["counts"]["workers_from_punches"] == 1
        assert data["total"] == sum(data["counts"].values())
        assert data["errors"] == []


# ===== Directory =====

class TestDirectory:
    """참조 데이터 조회."""

    async def test_workers_and_location(self, client: AsyncClient, db: AsyncSession, manager_token):
        db.add(Worker(id="w2", name="Bruna"))
        db.add(Worker(id="w1", name="Ana"))
        db.add(Location(id="loc-1", name="Hospital Central", slug="central"))
        db.add(Sector(id="s2", location_id="loc-1", name="Ward"))
        db.add(Sector(id="s1", location_id="loc-1", name="ICU"))
        await db.commit()

        res = await client.get(f"{ADMIN}/directory/workers", headers=auth_header(manager_token))
        assert res.status_code == 200
        assert [w["name"] for w in res.json()] == ["Ana", "Bruna"]

        res = await client.get(f"{ADMIN}/directory/workers/w2", headers=auth_header(manager_token))
        assert res.json()["is_placeholder"] is False

        res = await client.get(f"{ADMIN}/directory/locations/loc-1", headers=auth_header(manager_token))
        assert res.status_code == 200
        assert [s["name"] for s in res.json()["sectors"]] == ["ICU", "Ward"]

        res = await client.get(f"{ADMIN}/directory/locations/nope", headers=auth_header(manager_token))
        assert res.status_code == 404

    async def test_kiosk_punch_uses_registered_name(self, client: AsyncClient, db: AsyncSession, kiosk_token):
        db.add(Worker(id="w1", name="Maria"))
        await db.commit()

        res = await client.post(f"{APP}/punches", json={
            "kind": "ENTRY", "worker_id": "w1", "worker_name": "typed at kiosk",
        }, headers=auth_header(kiosk_token))
        assert res.status_code == 201
        assert res.json()["worker_name"] == "Maria"

    async def test_sector_of_another_location(self, client: AsyncClient, db: AsyncSession, manager_token):
        db.add(Location(id="loc-1", name="A", slug="a"))
        db.add(Location(id="loc-2", name="B", slug="b"))
        db.add(Sector(id="s1", location_id="loc-1", name="ICU"))
        await db.commit()

        res = await client.post(f"{ADMIN}/punches", json={
            "worker_id": "w1",
            "kind": "ENTRY",
            "timestamp": at(8).isoformat(),
            "location_id": "loc-2",
            "sector_id": "s1",
        }, headers=auth_header(manager_token))
        assert res.status_code == 422
