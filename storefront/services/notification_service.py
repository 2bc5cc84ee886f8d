# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień o nowych zamówieniach i rezerwacjach.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_submission_notification(kind: str, record_id: int, email: str):
        send_submission_notification_task.delay(kind, record_id, email)


@celery_app.task(name="storefront.services.notification_service.send_submission_notification_task")
def send_submission_notification_task(kind: str, record_id: int, email: str):
    """
    Celery task - na razie tylko loguje potwierdzenie dla klienta i sklepu.
    """
    logger.info(f"[NOTIFICATION] {email}: {kind} {record_id} received")
    return {"kind": kind, "id": record_id, "email": email, "status": "sent"}
