from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    name = 'notifications'
    verbose_name = 'Notifications'

    store = None
    worker = None

    def ready(self):
        # One store (and connection pool) per process, shared by the views
        # and the delivery worker.
        from .store import NotificationStore

        self.store = NotificationStore.from_settings()
