"""애플리케이션 로거 설정 — Axiom 핸들러 연동.

Application logger setup. Service-level events (reconciliation warnings,
sweep summaries, remote sync failures) go through stdlib loggers under the
"timeclock" namespace; when Axiom is configured they are shipped with
axiom-py's AxiomHandler, otherwise they go to stderr.
"""

import logging

from axiom_py import Client as AxiomClient
from axiom_py.logging import AxiomHandler

from timeclock.config import settings

_ROOT_LOGGER_NAME = "timeclock"
_configured = False


def configure_logging() -> None:
    """루트 'timeclock' 로거를 한 번만 구성합니다 — Configure the package logger once."""
    global _configured
    if _configured:
        return

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(settings.LOG_LEVEL.upper())

    if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
        client = AxiomClient(token=settings.AXIOM_API_TOKEN)
        root.addHandler(AxiomHandler(client, settings.AXIOM_DATASET))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """모듈별 로거 — Logger under the package namespace, e.g. get_logger("reconciliation")."""
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
