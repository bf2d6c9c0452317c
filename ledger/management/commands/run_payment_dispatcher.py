import logging
import random
import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from ledger.tasks.dispatch_payments import dispatch_pending_payments

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Deliver pending outbound payments to the settlement layer."

    def add_arguments(self, parser):
        parser.add_argument(
            "--limit",
            type=int,
            default=100,
            help="Max payments to dispatch per run",
        )
        parser.add_argument(
            "--loop",
            action="store_true",
            help="Run continuously with sleep intervals between cycles",
        )
        parser.add_argument(
            "--sleep-seconds",
            type=float,
            default=None,
            help="Base sleep interval for loop mode (defaults to WORKER_LOOP_INTERVAL)",
        )

    def handle(self, *args, **options):
        limit = options["limit"]
        base_interval = (
            settings.WORKER_LOOP_INTERVAL
            if options["sleep_seconds"] is None
            else options["sleep_seconds"]
        )

        if limit <= 0:
            raise CommandError("--limit must be greater than zero")
        if base_interval < 0:
            raise CommandError("--sleep-seconds must be >= 0")

        while True:
            summary = dispatch_pending_payments(limit=limit)
            self.stdout.write(
                self.style.SUCCESS(
                    "payment dispatcher run completed: "
                    f"processed={summary['processed']} settled={summary['settled']} "
                    f"failed={summary['failed']} requeued={summary['requeued']} "
                    f"unknown={summary['unknown']}"
                )
            )

            if not options["loop"]:
                break

            jitter_max = settings.WORKER_LOOP_JITTER_MAX
            jitter = random.uniform(0, jitter_max) if jitter_max > 0 else 0.0
            sleep_seconds = max(0.0, base_interval + jitter)
            logger.debug("event=dispatcher_sleep sleep_ms=%s", int(sleep_seconds * 1000))
            time.sleep(sleep_seconds)
