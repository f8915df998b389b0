"""Asynchronous note event dispatcher.

Principles:
- Single Responsibility: Deliver events from publishers to handlers
- Dependency Injection: handlers subscribe, the dispatcher knows nothing of indexing
- Handler failures are logged, never allowed to stop a worker thread
"""

import copy
import logging
import threading
from queue import Queue, Empty
from typing import List, Optional

from domain_models import Note, Paragraph
from events.event_handler import NoteEventHandler
from events.note_events import (
    NoteEvent, NoteCreateEvent, NoteRemoveEvent, NoteUpdateEvent,
    ParagraphCreateEvent, ParagraphRemoveEvent, ParagraphUpdateEvent
)

logger = logging.getLogger(__name__)


class EventDispatcherClosedError(RuntimeError):
    """Event published after the dispatcher was closed"""
    pass


class NoteEventDispatcher:
    """Delivers published events to subscribed handlers on worker threads

    Each event is delivered once to every handler. With a single worker
    events are handled in publication order; with more, events for
    different notes (or the same note) may run concurrently.
    """

    def __init__(self, workers: int = 1, shutdown_timeout: float = 5.0, name: str = "NoteEventDispatcher"):
        self.name = name
        self.num_workers = workers
        self.shutdown_timeout = shutdown_timeout
        self.running = False
        self._queue: Queue = Queue()
        self._handlers: List[NoteEventHandler] = []
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending = 0
        self._closed = False

    def subscribe(self, handler: NoteEventHandler):
        """Register handler for all future events"""
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def unsubscribe(self, handler: NoteEventHandler):
        """Stop delivering events to handler"""
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def start(self):
        """Start worker threads"""
        with self._lock:
            if self.running or self._closed:
                return
            self.running = True
            self._threads = [
                threading.Thread(target=self._work_loop, name=f"{self.name}-{i}", daemon=True)
                for i in range(self.num_workers)
            ]
        for thread in self._threads:
            thread.start()
        logger.info(f"{self.name} started with {self.num_workers} worker(s)")

    def publish(self, event: NoteEvent):
        """Queue event for asynchronous delivery

        Raises:
            EventDispatcherClosedError: If close() has been called.
        """
        with self._lock:
            if self._closed:
                raise EventDispatcherClosedError(f"{self.name} is closed")
            self._pending += 1
        self._queue.put(event)

    # on_* helpers publish a deep copy, so later edits to the live objects
    # do not reach queued events

    def on_note_create(self, note: Note):
        self.publish(NoteCreateEvent(copy.deepcopy(note)))

    def on_note_remove(self, note: Note):
        self.publish(NoteRemoveEvent(copy.deepcopy(note)))

    def on_note_update(self, note: Note):
        self.publish(NoteUpdateEvent(copy.deepcopy(note)))

    def on_paragraph_create(self, paragraph: Paragraph, note: Optional[Note] = None):
        self.publish(ParagraphCreateEvent(*copy.deepcopy((paragraph, note))))

    def on_paragraph_remove(self, paragraph: Paragraph, note: Optional[Note] = None):
        self.publish(ParagraphRemoveEvent(*copy.deepcopy((paragraph, note))))

    def on_paragraph_update(self, paragraph: Paragraph, note: Optional[Note] = None):
        self.publish(ParagraphUpdateEvent(*copy.deepcopy((paragraph, note))))

    def drain_events(self, timeout: Optional[float] = None) -> bool:
        """Block until every published event has been handled

        Returns:
            True if drained, False on timeout.
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout=timeout)

    def pending(self) -> int:
        """Events published but not yet handled"""
        with self._lock:
            return self._pending

    def close(self):
        """Stop accepting events, drain the queue, then stop workers

        Events still queued after shutdown_timeout are abandoned.
        Safe to call more than once.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            was_running = self.running

        if was_running and not self.drain_events(timeout=self.shutdown_timeout):
            logger.warning(f"{self.name} closing with {self.pending()} unhandled event(s)")

        with self._lock:
            self.running = False
        for thread in self._threads:
            thread.join(timeout=self.shutdown_timeout)
        self._discard_queued()
        logger.info(f"{self.name} closed")

    def is_running(self) -> bool:
        """Check if workers are running"""
        with self._lock:
            return self.running

    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    def _work_loop(self):
        """Main work loop - delivers events until stopped"""
        while self.is_running():
            try:
                event = self._queue.get(timeout=0.1)
            except Empty:
                continue
            try:
                self._deliver(event)
            finally:
                self._mark_done()

    def _deliver(self, event: NoteEvent):
        """Call every subscribed handler, isolating failures"""
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler.handle(event)
            except Exception as e:
                logger.error(
                    f"{self.name}: handler {type(handler).__name__} failed on "
                    f"{type(event).__name__}: {e}",
                    exc_info=True
                )

    def _mark_done(self):
        with self._idle:
            self._pending -= 1
            self._idle.notify_all()

    def _discard_queued(self):
        """Drop events left after shutdown so pending count settles"""
        while True:
            try:
                self._queue.get_nowait()
            except Empty:
                break
            self._mark_done()
