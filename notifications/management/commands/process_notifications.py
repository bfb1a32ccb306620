import signal

from django.core.management.base import BaseCommand, CommandError

from notifications.exceptions import WorkerIterationError
from notifications.worker import build_worker


class Command(BaseCommand):
    help = "Run the notification delivery worker in the foreground (Ctrl-C or SIGTERM to stop)."

    def add_arguments(self, parser):
        parser.add_argument('--once', action='store_true', help='Process at most one queued notification and exit.')
        parser.add_argument('--interval', type=float, default=None, help='Override the poll interval in seconds.')

    def handle(self, *args, **options):
        worker = build_worker()
        if options['interval'] is not None:
            worker.poll_interval = options['interval']

        if options['once']:
            try:
                notification = worker.process_next()
            except WorkerIterationError as e:
                raise CommandError(f"failed: {e}") from e
            if notification is None:
                self.stdout.write("queue empty")
            else:
                self.stdout.write(self.style.SUCCESS(f"sent: {notification.id}"))
            return

        signal.signal(signal.SIGTERM, lambda signum, frame: worker.stop())
        try:
            worker.run_forever()
        except KeyboardInterrupt:
            worker.stop()
        self.stdout.write(self.style.SUCCESS("Delivery worker stopped."))
