"""Celery tasks for payment sessions."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import PaymentSessionManager

logger = logging.getLogger(__name__)


@shared_task(name="payments.sweep_expired_sessions")
def sweep_expired_sessions() -> dict[str, int]:
    """
    Expire pending payment sessions past their deadline.

    Catches sessions nobody reads again after they lapse; reads already
    expire overdue sessions lazily. Runs every minute through Celery Beat.

    Returns:
        dict: {"expired": number of sessions expired}
    """
    expired = PaymentSessionManager().sweep_expired()
    return {"expired": expired}
