"""UPI payment instructions.

The engine only produces the ``upi://pay`` string. Turning it into a
displayable artifact (a QR image) is delegated to the callable named by the
``PAYMENT_INSTRUCTION_RENDERER`` setting, which receives the payload and
returns text to store on the session.
"""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import urlencode

from django.utils.module_loading import import_string  # type: ignore

from shared.application.engine_config import EngineConfig
from shared.domain.value_objects import round2


def build_upi_payload(config: EngineConfig, amount: Decimal, reference: str) -> str:
    params = urlencode(
        {
            "pa": config.merchant_id,
            "pn": config.merchant_name,
            "am": f"{round2(amount):.2f}",
            "tr": reference,
            "tn": f"Hotel Booking Payment - {reference[:8]}",
            "cu": config.currency,
        }
    )
    return f"upi://pay?{params}"


def render_instruction(config: EngineConfig, payload: str) -> str:
    if not config.payment_renderer:
        return payload
    renderer = import_string(config.payment_renderer)
    return renderer(payload)
