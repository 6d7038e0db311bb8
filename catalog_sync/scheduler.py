"""
In-process schedule controller.

``start()`` is plugin activation: one immediate cycle, then a recurring timer.
``stop()`` is deactivation: the timer is cancelled, a cycle already running is
left to finish. Overlapping cycles are refused by the orchestrator's lock.
"""
import enum
import logging
import threading
from datetime import timedelta

from django.db import close_old_connections
from django.utils import timezone

from catalog_sync.options import OptionStore

logger = logging.getLogger(__name__)


class ScheduleState(enum.Enum):
    UNREGISTERED = 'unregistered'
    SCHEDULED = 'scheduled'


class ScheduleController:
    def __init__(self, orchestrator, store=None, timer_factory=threading.Timer, clock=timezone.now):
        self.orchestrator = orchestrator
        self.store = store or OptionStore()
        self._timer_factory = timer_factory
        self._clock = clock
        self._lock = threading.Lock()
        self._timer = None
        self._generation = 0
        self._next_run_at = None

    @property
    def state(self) -> ScheduleState:
        with self._lock:
            return ScheduleState.SCHEDULED if self._timer is not None else ScheduleState.UNREGISTERED

    @property
    def next_run_at(self):
        with self._lock:
            return self._next_run_at

    def start(self):
        self.store.install_defaults()
        self.orchestrator.run()
        self.orchestrator.ensure_destination()
        with self._lock:
            if self._timer is None:
                self._arm()
                logger.info("Catalog sync scheduled, next run at %s", self._next_run_at)

    def stop(self):
        with self._lock:
            timer, self._timer = self._timer, None
            self._next_run_at = None
        if timer is not None:
            timer.cancel()
            self.store.save_next_sync(None)
            logger.info("Catalog sync unscheduled")

    def status(self):
        return self.store.load_status()

    def _arm(self):
        interval = self.store.load_config().interval.seconds
        self._generation += 1
        timer = self._timer_factory(interval, self._fire, args=(self._generation,))
        timer.daemon = True
        self._timer = timer
        self._next_run_at = self._clock() + timedelta(seconds=interval)
        self.store.save_next_sync(self._next_run_at)
        timer.start()

    def _fire(self, generation):
        close_old_connections()
        with self._lock:
            # A timer cancelled by stop() may still fire once
            if self._timer is None or generation != self._generation:
                return
            self._arm()
        try:
            self.orchestrator.run()
        except Exception:
            logger.exception("Scheduled catalog sync crashed")
        finally:
            close_old_connections()
