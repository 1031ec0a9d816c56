import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("stayflow")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Expire overdue payment sessions - every minute
    "sweep-expired-payment-sessions": {
        "task": "payments.sweep_expired_sessions",
        "schedule": float(os.environ.get("PAYMENT_SESSION_SWEEP_SECONDS", 60)),
        "options": {"expires": 50},
    },
}
