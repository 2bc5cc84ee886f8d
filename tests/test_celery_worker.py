from unittest.mock import patch

from celery.signals import setup_logging as celery_setup_logging

from storefront import celery_worker


def test_worker_logging_uses_app_configuration():
    with patch.object(celery_worker, "setup_logging") as configure:
        celery_setup_logging.send(sender=None, loglevel="INFO", logfile=None, format="", colorize=False)

    configure.assert_called_once_with()


def test_notification_task_is_registered():
    import storefront.services.notification_service  # noqa: F401

    assert "storefront.services.notification_service.send_submission_notification_task" in celery_worker.celery_app.tasks
