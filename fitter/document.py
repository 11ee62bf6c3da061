# document.py — final JSON document: sessionSummary, sport, laps, records

import json

import numpy as np

from .errors import SerializationError


def _json_default(o):
    if isinstance(o, (np.integer, np.floating, np.bool_)):
        return o.item()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def assemble(collector, options):
    # only one session and one sport message are expected; extras are not emitted
    document = {}
    if collector.sessions:
        document["sessionSummary"] = collector.sessions[0]
    if collector.sports:
        document["sport"] = collector.sports[0]
    document["laps"] = collector.laps
    if not options.no_records:
        document["records"] = collector.records
    return document


def serialize(document, pretty=True):
    try:
        if pretty:
            return json.dumps(document, ensure_ascii=False, allow_nan=False, indent=2,
                              default=_json_default)
        return json.dumps(document, ensure_ascii=False, allow_nan=False, separators=(",", ":"),
                          default=_json_default)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"marshal json: {exc}") from exc
