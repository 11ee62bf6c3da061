# ingest.py — ordered, bounded hand-off from the decoder to a single worker thread

import logging
import queue
import threading

from .errors import IngestionClosedError
from .options import DEFAULT_CHANNEL_BUFFER_SIZE

logger = logging.getLogger(__name__)

_CLOSED = object()


class IngestionQueue:
    """FIFO between decoder callbacks (producers) and one consumer thread.

    put() blocks only while the queue is full. close() ends the input; the
    worker drains what is left, then sets the completion event once. After a
    handler failure the worker keeps draining without calling the handler, so
    a blocked producer is always released.
    """

    def __init__(self, handler, capacity=DEFAULT_CHANNEL_BUFFER_SIZE, name="fitter-ingest"):
        if capacity <= 0:
            capacity = DEFAULT_CHANNEL_BUFFER_SIZE
        self.capacity = capacity
        self.error = None
        self._handler = handler
        self._queue = queue.Queue(maxsize=capacity)
        self._lock = threading.Lock()
        self._closed = False
        self._done = threading.Event()
        self._handled = 0
        self._thread = threading.Thread(target=self._drain, name=name, daemon=True)
        self._thread.start()

    @property
    def closed(self):
        return self._closed

    @property
    def done(self):
        return self._done.is_set()

    @property
    def handled(self):
        return self._handled

    def put(self, item):
        if self._closed:
            raise IngestionClosedError("put on a closed ingestion queue")
        self._queue.put(item)

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSED)

    def wait(self, timeout=None):
        """Block until everything queued before close() was handled."""
        return self._done.wait(timeout)

    def _drain(self):
        try:
            while True:
                item = self._queue.get()
                if item is _CLOSED:
                    break
                if self.error is not None:
                    continue
                try:
                    self._handler(item)
                    self._handled += 1
                except Exception as exc:
                    logger.exception("ingestion handler failed; draining remaining items")
                    self.error = exc
        finally:
            logger.debug("ingestion queue drained (%d items handled)", self._handled)
            self._done.set()
