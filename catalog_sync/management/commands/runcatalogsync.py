from threading import Event

from django.core.management.base import BaseCommand

from catalog_sync.clients.shopify_client import ShopifyClient
from catalog_sync.options import OptionStore
from catalog_sync.scheduler import ScheduleController
from catalog_sync.sync import SyncOrchestrator


class Command(BaseCommand):
    help = "Mirror the remote product catalog into the local table on the configured schedule."

    def add_arguments(self, parser):
        parser.add_argument('--once', action='store_true', help="Run a single sync cycle and exit.")
        parser.add_argument('--status', action='store_true', help="Print the last sync status and exit.")

    def handle(self, *args, **options):
        store = OptionStore()

        if options['status']:
            for key, value in store.load_status().display().items():
                self.stdout.write(f"{key}: {value}")
            return

        orchestrator = SyncOrchestrator(client=ShopifyClient(), store=store)

        if options['once']:
            result = orchestrator.run()
            if result is None:
                self.stderr.write("Sync cycle did not complete, see log")
            else:
                self.stdout.write(self.style.SUCCESS(
                    f"Synced {result.inserted}/{result.attempted} products ({result.failed} failed)"
                ))
            return

        controller = ScheduleController(orchestrator, store=store)
        controller.start()
        self.stdout.write(f"Scheduled, next sync at {controller.next_run_at}. Ctrl-C to stop.")
        try:
            Event().wait()
        except KeyboardInterrupt:
            pass
        finally:
            controller.stop()
            self.stdout.write("Unscheduled.")
