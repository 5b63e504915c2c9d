"""CLI entry point: python3 -m readcache

Modes:
  --command/--args  Single-shot command against a fresh cache
  --sidecar         Persistent stdin/stdout JSON loop over one long-lived cache
"""

import argparse
import json
import logging
import os
import sys
import traceback

from .dispatch import dispatch
from .file_cache import DEFAULT_MAX_SIZE, BoundedFileCache
from .sources import LocalFileSource

logger = logging.getLogger(__name__)
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def main():
    parser = argparse.ArgumentParser(description="Bounded file content cache")
    parser.add_argument("--sidecar", action="store_true",
                        help="Run as persistent sidecar (stdin/stdout JSON)")
    parser.add_argument("--command", help="Cache command to run")
    parser.add_argument("--args", default="{}", help="JSON-encoded arguments")
    parser.add_argument("--max-size", type=int, default=DEFAULT_MAX_SIZE,
                        help="Maximum number of cached files")
    parser.add_argument("--encoding", default="utf-8", help="Text encoding of cached files")
    args = parser.parse_args()

    _configure_logging()

    if args.max_size <= 0:
        parser.error("--max-size must be positive")
    cache = BoundedFileCache(args.max_size, source=LocalFileSource(args.encoding))

    if args.sidecar:
        _run_sidecar(cache)
    else:
        if not args.command:
            parser.error("--command is required (or use --sidecar)")
        _run_single(cache, args)


def _configure_logging():
    level_raw = os.getenv("READCACHE_LOG_LEVEL", "WARNING").strip().upper()
    logging.basicConfig(stream=sys.stderr, level=logging.WARNING)
    if level_raw not in _VALID_LOG_LEVELS:
        logger.warning(
            "cli.invalid_log_level",
            extra={"level": level_raw, "fallback_level": "WARNING"},
        )
        return
    logging.getLogger().setLevel(level_raw)


def _run_single(cache, args):
    """Single-shot mode."""
    try:
        extra_args = json.loads(args.args)
    except json.JSONDecodeError as e:
        _error_exit("InvalidArgs", f"Failed to parse --args JSON: {e}")

    try:
        result = dispatch(args.command, cache, extra_args)
        json.dump(result, sys.stdout)
        sys.stdout.write("\n")
    except Exception as e:
        _error_exit(type(e).__name__, str(e))


def _run_sidecar(cache):
    """Persistent sidecar: read JSON requests from stdin, write responses to stdout."""
    # Signal readiness
    sys.stdout.write('{"status":"ready"}\n')
    sys.stdout.flush()

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue

        try:
            req = json.loads(line)
        except json.JSONDecodeError as e:
            resp = {"id": None, "error": {"type": "InvalidJSON", "message": str(e)}}
            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
            continue

        if not isinstance(req, dict):
            resp = {
                "id": None,
                "error": {"type": "InvalidRequest", "message": "Request must be a JSON object"},
            }
            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
            continue

        req_id = req.get("id")
        command = req.get("command", "")
        extra_args = req.get("args", {})

        try:
            result = dispatch(command, cache, extra_args)
            resp = {"id": req_id, "result": result}
        except Exception as e:
            resp = {"id": req_id, "error": {"type": type(e).__name__, "message": str(e)}}

        sys.stdout.write(json.dumps(resp) + "\n")
        sys.stdout.flush()


def _error_exit(error_type: str, message: str):
    """Write structured error to stderr and exit."""
    error = {
        "error": error_type,
        "message": message,
        "traceback": traceback.format_exc(),
    }
    json.dump(error, sys.stderr)
    sys.stderr.write("\n")
    sys.exit(1)


if __name__ == "__main__":
    main()
