#!/usr/bin/env python3
"""
Job scheduling for PnP Mention Scanner
Realtime poll every N seconds and an hourly 7-day snapshot
"""
import time
import logging
import threading
from typing import Optional

import schedule

from .service import MentionsService

logger = logging.getLogger(__name__)


class MentionScheduler:
    """Registers the mention jobs and runs them on a background thread"""

    def __init__(self, service: MentionsService, poll_interval_seconds: int = 15,
                 scheduler: Optional[schedule.Scheduler] = None, tick_seconds: float = 1.0):
        self.service = service
        self.poll_interval_seconds = poll_interval_seconds
        self.scheduler = scheduler or schedule.Scheduler()
        self.tick_seconds = tick_seconds
        self.is_running = False
        self._thread: Optional[threading.Thread] = None

    def setup_scheduled_tasks(self):
        """Register jobs; disabled jobs short-circuit inside the service"""
        logger.info("📅 Setting up scheduled tasks...")

        self.scheduler.every(self.poll_interval_seconds).seconds.do(self.service.poll_new_mentions)
        self.scheduler.every().hour.do(self.service.cron_index_mentions)

        logger.info(f"✅ Scheduled tasks configured: poll every {self.poll_interval_seconds}s, snapshot hourly")

    def run_loop(self):
        """Main scheduling loop."""
        logger.info("🔄 Starting scheduler loop...")
        self.is_running = True

        while self.is_running:
            try:
                self.scheduler.run_pending()
            except Exception as e:
                logger.error(f"Scheduler loop error: {e}")
            time.sleep(self.tick_seconds)

    def start(self) -> threading.Thread:
        """Start the loop on a daemon thread."""
        self.setup_scheduled_tasks()
        self._thread = threading.Thread(target=self.run_loop, name='mention-scheduler', daemon=True)
        self._thread.start()
        logger.info("🔄 Scheduler started in daemon mode")
        return self._thread

    def stop(self):
        logger.info("🛑 Stopping scheduler...")
        self.is_running = False
        self.scheduler.clear()
