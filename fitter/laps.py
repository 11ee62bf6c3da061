# laps.py — per-lap averages of record metrics the lap message does not carry
#
# A record belongs to a lap when start_time <= timestamp < start_time + total_timer_time.
# The record exactly at the lap end is the first one of the next lap.

import logging
import math
import re

import pandas as pd

logger = logging.getLogger(__name__)

# date, "T", time, optional fraction, then "Z" or a numeric offset
RFC3339 = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$")

# record key → new lap key
LAP_AVERAGES = {
    # Stryd (developer fields)
    "Power": "avg_stryd_power",
    "Air Power": "avg_air_power",
    "Form Power": "avg_form_power",
    "Ground Time": "avg_stryd_ground_time",
    "Impact Loading Rate": "avg_impact_loading_rate",
    "Leg Spring Stiffness": "avg_leg_spring_stiffness",
    "Vertical Oscillation": "avg_stryd_vo",

    # Garmin running dynamics (standard fields)
    "stance_time": "avg_garmin_stance_time",
    "stance_time_balance": "avg_garmin_stance_time_balance",
    "vertical_oscillation": "avg_garmin_vo",
    "vertical_ratio": "avg_garmin_vertical_ratio",
    "step_length": "avg_garmin_step_length",
}


def get_float(d, key):
    """Numeric value of d[key] as float, None if missing or not a number."""
    v = d.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    return float(v)


def is_rfc3339(v):
    return isinstance(v, str) and RFC3339.match(v) is not None


def parse_time(v):
    """RFC 3339 string → UTC Timestamp; anything else → None."""
    if not is_rfc3339(v):
        return None
    ts = pd.to_datetime(v, utc=True, errors="coerce", format="ISO8601")
    return None if pd.isna(ts) else ts


def records_frame(records, keys=None):
    """DataFrame of record timestamps (UTC) and tracked metrics; rows without a timestamp are left out."""
    keys = list(LAP_AVERAGES if keys is None else keys)
    rows = []
    for r in records:
        ts = r.get("timestamp")
        row = {"timestamp": ts if is_rfc3339(ts) else None}
        for k in keys:
            row[k] = get_float(r, k)
        rows.append(row)

    frame = pd.DataFrame(rows, columns=["timestamp"] + keys)
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True, errors="coerce", format="ISO8601")
    if keys:
        frame[keys] = frame[keys].astype("float64")
    return frame.dropna(subset=["timestamp"])


def lap_window(lap):
    """(start, end) of a lap, or None when start_time / total_timer_time are unusable."""
    start = parse_time(lap.get("start_time"))
    duration = get_float(lap, "total_timer_time")
    if start is None or duration is None or not math.isfinite(duration):
        return None
    return start, start + pd.to_timedelta(duration, unit="s")


def enrich_laps(laps, records, averages=None):
    """Attach avg_* keys to every lap in place. Returns the number of laps enriched."""
    averages = LAP_AVERAGES if averages is None else averages
    if not laps or not records:
        return 0

    frame = records_frame(records, averages)
    enriched = 0
    for lap in laps:
        window = lap_window(lap)
        if window is None:
            continue
        start, end = window
        in_lap = frame[(frame["timestamp"] >= start) & (frame["timestamp"] < end)]

        added = False
        for source, target in averages.items():
            col = in_lap[source]
            count = int(col.count())
            if count > 0:
                lap[target] = float(col.sum()) / count
                added = True
        enriched += added

    logger.debug("enriched %d of %d laps from %d records", enriched, len(laps), len(frame))
    return enriched
