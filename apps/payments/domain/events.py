"""
Payment Domain Events
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class PaymentSessionCreated(DomainEvent):
    session_id: int
    booking_id: int
    amount: Decimal
    expires_at: datetime


@dataclass
class PaymentSessionExpired(DomainEvent):
    session_id: int
    booking_id: int


@dataclass
class PaymentVerified(DomainEvent):
    session_id: int
    booking_id: int
    payment_id: int
    amount: Decimal
    transaction_id: str
    verified_by_id: Optional[int] = None
