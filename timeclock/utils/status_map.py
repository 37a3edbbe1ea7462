"""레거시 상태 값 정규화 테이블.

Legacy status and kind normalization tables. Older clients wrote Portuguese
display strings into the status and kind columns; this is the single
authoritative mapping from those values to the canonical enums. Justification
reads, shift derivation and the consistency sweep all go through it.
"""

from timeclock.models.justification import JustificationStatus
from timeclock.models.punch import PunchKind, PunchStatus

# 타각 레거시 상태 — Punch legacy status values
PUNCH_LEGACY_STATUS: dict[str, PunchStatus] = {
    "aberto": PunchStatus.OPEN,
    "em aberto": PunchStatus.OPEN,
    "fechado": PunchStatus.CLOSED,
    "pendente": PunchStatus.PENDING,
    "aguardando autorização": PunchStatus.PENDING,
    "aguardando autorizacao": PunchStatus.PENDING,
    "rejeitado": PunchStatus.REJECTED,
}

# 타각 레거시 종류 — Punch legacy kind values (upper-cased keys)
PUNCH_LEGACY_KIND: dict[str, PunchKind] = {
    "ENTRADA": PunchKind.ENTRY,
    "INTERVALO_IDA": PunchKind.BREAK_OUT,
    "INTERVALO_VOLTA": PunchKind.BREAK_IN,
    "SAIDA": PunchKind.EXIT,
    "SAÍDA": PunchKind.EXIT,
}

# 소명 레거시 상태 — Justification legacy status values
JUSTIFICATION_LEGACY_STATUS: dict[str, JustificationStatus] = {
    "pendente": JustificationStatus.PENDING,
    "aguardando autorização": JustificationStatus.PENDING,
    "aguardando autorizacao": JustificationStatus.PENDING,
    "aprovada": JustificationStatus.APPROVED,
    "aprovado": JustificationStatus.APPROVED,
    "fechado": JustificationStatus.APPROVED,
    "rejeitada": JustificationStatus.REJECTED,
    "rejeitado": JustificationStatus.REJECTED,
}


def normalize_punch_status(value: str | None) -> PunchStatus:
    """타각 상태 문자열을 정규 enum으로 변환합니다.

    Map a stored punch status string to its canonical value.
    Unknown values fall back to PENDING so a manager reviews the punch.
    """
    if not value:
        return PunchStatus.PENDING
    key = value.strip()
    if key.upper() in PunchStatus.__members__:
        return PunchStatus(key.upper())
    return PUNCH_LEGACY_STATUS.get(key.lower(), PunchStatus.PENDING)


def normalize_justification_status(value: str | None) -> JustificationStatus:
    """소명 상태 문자열을 정규 enum으로 변환합니다.

    Map a stored justification status string to its canonical value.
    Unknown values fall back to PENDING (back into the manager queue).
    """
    if not value:
        return JustificationStatus.PENDING
    key = value.strip()
    if key.upper() in JustificationStatus.__members__:
        return JustificationStatus(key.upper())
    return JUSTIFICATION_LEGACY_STATUS.get(key.lower(), JustificationStatus.PENDING)


def normalize_punch_kind(value: str | None) -> PunchKind | None:
    """타각 종류 문자열을 정규 enum으로 변환합니다. 알 수 없으면 None.

    Map a stored punch kind to its canonical value, or None when unknown.
    """
    if not value:
        return None
    key = value.strip().upper()
    if key in PunchKind.__members__:
        return PunchKind(key)
    return PUNCH_LEGACY_KIND.get(key)


def is_canonical_punch_status(value: str | None) -> bool:
    return value in PunchStatus.__members__


def is_canonical_punch_kind(value: str | None) -> bool:
    return value in PunchKind.__members__


def is_canonical_justification_status(value: str | None) -> bool:
    return value in JustificationStatus.__members__
