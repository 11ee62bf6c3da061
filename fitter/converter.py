# converter.py — listener for decoder events that builds one enriched JSON document
#
# Decoder callbacks only enqueue. A single worker thread translates and buckets
# messages, so the collector and the description index are never shared.

import logging

from .collector import Collector
from .descriptions import FieldDescriptionIndex, description_from_message
from .document import assemble, serialize
from .errors import ConversionError, FitterError
from .ingest import IngestionQueue
from .laps import enrich_laps
from .messages import DecodedMessage, MessageDefinition
from .options import ConversionOptions
from .profile import MesgNum
from .translator import MessageTranslator

logger = logging.getLogger(__name__)


class Converter:
    """Receives message definitions and messages in wire order.

    Usage::

        conv = Converter(ConversionOptions(no_records=True))
        for event in events:
            conv.on_mesg(event)
        conv.wait()
        if conv.error is None:
            print(conv.result)
    """

    def __init__(self, options=None):
        self.options = options or ConversionOptions()
        self.descriptions = FieldDescriptionIndex()
        self.collector = Collector()
        self.translator = MessageTranslator(self.options, self.descriptions)
        self._err = None
        self._result = ""
        self._finished = False
        self._queue = IngestionQueue(self._handle_event, capacity=self.options.channel_buffer_size)

    @property
    def error(self):
        """Error that stopped the conversion, if any."""
        return self._err

    @property
    def result(self):
        """Final JSON; empty until wait() returns, and on error."""
        return self._result

    # ---------- listener callbacks ----------

    def on_mesg_def(self, mesg_def):
        self._queue.put(mesg_def)

    def on_mesg(self, mesg):
        self._queue.put(mesg)

    # ---------- completion ----------

    def wait(self):
        """Close the input, wait for the worker to drain it, then build the JSON."""
        if self._finished:
            return
        self._queue.close()
        self._queue.wait()
        if self._err is None and self._queue.error is not None:
            self._err = ConversionError(f"process message: {self._queue.error}")
        self._result = self._marshal()
        self._finished = True

    # ---------- worker side ----------

    def _handle_event(self, event):
        if isinstance(event, MessageDefinition):
            return  # definitions carry nothing for the JSON output
        if isinstance(event, DecodedMessage):
            self._process_message(event)
            return
        logger.warning("ignoring unexpected event %r", type(event).__name__)

    def _process_message(self, mesg):
        if self._err is not None:
            return
        try:
            if mesg.num == MesgNum.FIELD_DESCRIPTION:
                self.descriptions.record(description_from_message(mesg))
                return
            if not self.collector.wants(mesg.num):
                return
            translated = self.translator.translate(mesg)
            if translated is None:
                return
            self.collector.add(mesg.num, translated)
        except Exception as exc:
            logger.exception("could not translate message %s", mesg.name or mesg.num)
            self._err = ConversionError(f"translate message {mesg.name or mesg.num}: {exc}")
            self._err.__cause__ = exc

    def _marshal(self):
        if self._err is not None:
            return ""

        try:
            enrich_laps(self.collector.laps, self.collector.records)
            document = assemble(self.collector, self.options)
            out = serialize(document, pretty=self.options.pretty_print)
        except FitterError as exc:
            self._err = exc
            logger.error("%s", exc)
            return ""
        except Exception as exc:
            logger.exception("could not build the document")
            self._err = ConversionError(f"build document: {exc}")
            self._err.__cause__ = exc
            return ""
        logger.debug("converted %s", self.collector.counts())
        return out
