# cli.py — FIT → enriched JSON from the command line
#
#   fitter input.fit [more.fit ...] [--out <path|->] [--no-records] [--deg] [--valid] [--raw]
#                    [--no-checksum] [--compact] [--buffer-size N] [-v]
#
# Output: {"sessionSummary", "sport", "laps" (with avg_* from records), "records"}
# Defaults come from FITTER_* environment variables; flags override them.

import argparse
import logging
import os
import sys

from .decoder import fit_to_json
from .errors import FitterError
from .options import ConversionOptions

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def write_text(path, text):
    dirpath = os.path.dirname(path)
    if dirpath:
        os.makedirs(dirpath, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")


def build_parser():
    ap = argparse.ArgumentParser(
        prog="fitter",
        description="FIT → JSON (session, sport, laps enriched with record averages, records)."
    )
    ap.add_argument("fit", nargs="+", help="Input .fit file(s)")
    ap.add_argument("--out", help="Output JSON path (default: <fit>.json). Use '-' for STDOUT. Single input only.")
    ap.add_argument("--valid", action="store_true", help="Print only valid values")
    ap.add_argument("--deg", action="store_true",
                    help="Print GPS position (lat & long) in degrees instead of semicircles")
    ap.add_argument("--raw", action="store_true", help="Use raw values instead of scaled values")
    ap.add_argument("--no-records", action="store_true",
                    help="Exclude the high-resolution 'records' array from the JSON output")
    ap.add_argument("--no-checksum", action="store_true", help="[Decode option] skip the CRC check")
    ap.add_argument("--compact", action="store_true", help="Compact JSON instead of pretty-printed")
    ap.add_argument("--buffer-size", type=int, default=None, help="Ingestion queue capacity")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return ap


def options_from_args(args, environ=None):
    overrides = {}
    if args.valid: overrides["print_only_valid_value"] = True
    if args.deg: overrides["print_gps_position_in_degrees"] = True
    if args.raw: overrides["use_raw_value"] = True
    if args.no_records: overrides["no_records"] = True
    if args.compact: overrides["pretty_print"] = False
    if args.buffer_size is not None: overrides["channel_buffer_size"] = args.buffer_size
    return ConversionOptions.from_env(environ, **overrides)


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    if args.out and len(args.fit) > 1:
        ap.error("--out only works with a single input file")

    options = options_from_args(args)
    failed = 0

    for path in args.fit:
        ext = os.path.splitext(path)[1]
        if ext.lower() != ".fit":
            sys.stderr.write(f"unrecognized format: {ext or path}\n")
            failed += 1
            continue

        try:
            payload = fit_to_json(path, options, check_crc=not args.no_checksum)
        except (FitterError, OSError) as e:
            sys.stderr.write(f"could not convert {path!r} to json: {e}\n")
            failed += 1
            continue

        if args.out == "-":
            print(payload)
        else:
            out_path = args.out or f"{os.path.splitext(os.path.basename(path))[0]}.json"
            write_text(out_path, payload)
            print(f"[OK] wrote {out_path}")

    return 1 if failed else 0
