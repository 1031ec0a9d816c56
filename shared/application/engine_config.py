"""
Engine Configuration

Tax rate, payment session window and merchant identity are gathered once
from Django settings into an immutable EngineConfig, which every engine
service receives in its constructor.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class EngineConfig:
    gst_percentage: Decimal = Decimal('18')
    session_window_minutes: int = 5
    merchant_id: str = ''
    merchant_name: str = 'StayFlow Hotels'
    currency: str = 'INR'
    coupon_single_use_per_user: bool = True
    payment_renderer: Optional[str] = None

    def __post_init__(self):
        if self.gst_percentage < 0:
            raise ValueError("GST percentage cannot be negative")
        if self.session_window_minutes <= 0:
            raise ValueError("Payment session window must be positive")

    @property
    def gst_rate(self) -> Decimal:
        """GST as a fraction, e.g. 0.18"""
        return Decimal(self.gst_percentage) / Decimal('100')

    @classmethod
    def from_settings(cls, source=None) -> 'EngineConfig':
        """Build the configuration from Django settings (or any object with the same attributes)."""
        if source is None:
            from django.conf import settings as source

        return cls(
            gst_percentage=Decimal(str(getattr(source, 'GST_PERCENTAGE', '18'))),
            session_window_minutes=int(getattr(source, 'PAYMENT_SESSION_EXPIRY_MINUTES', 5)),
            merchant_id=getattr(source, 'UPI_MERCHANT_ID', ''),
            merchant_name=getattr(source, 'UPI_MERCHANT_NAME', 'StayFlow Hotels'),
            currency=getattr(source, 'CURRENCY', 'INR'),
            coupon_single_use_per_user=bool(getattr(source, 'COUPON_SINGLE_USE_PER_USER', True)),
            payment_renderer=getattr(source, 'PAYMENT_INSTRUCTION_RENDERER', None),
        )
