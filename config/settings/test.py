"""Settings used by the test suite."""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

GST_PERCENTAGE = '18'
PAYMENT_SESSION_EXPIRY_MINUTES = 5
UPI_MERCHANT_ID = 'test-merchant@upi'
UPI_MERCHANT_NAME = 'Test Hotels'
PAYMENT_INSTRUCTION_RENDERER = None
