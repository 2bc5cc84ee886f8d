# storefront/celery_worker.py
from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from storefront.utils.logging import setup_logging
from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "storefront.services.notification_service",
)

celery_app.conf.timezone = "UTC"


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    # ten sam format i poziom co API zamiast domyslnej konfiguracji celery
    setup_logging()
