import argparse
import json
import logging
import time

from markup import strip_markup
from shell import Session

logger = logging.getLogger(__name__)


def load_events(filename, session_id=None):
    events = []

    with open(filename, "r") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s:%d: skipping malformed line", filename, lineno)
                continue

            if session_id and entry.get("session") != session_id:
                continue

            events.append(entry)

    # Sort by timestamp just in case
    events.sort(key=lambda e: e["ts"])
    return events


def replay(events, realtime=True, out=print):
    if not events:
        out("No events to replay.")
        return

    out("\n--- REPLAY START ---\n")

    for e in events:
        cmd = e["cmd"]
        resp = e["resp"]
        delta_ms = e.get("delta_ms", 0)
        user = e.get("user") or e.get("session")

        # Real-time timing simulation
        if realtime and delta_ms > 0:
            time.sleep(delta_ms / 1000.0)

        out(f"{user}@terminux:{e.get('cwd', '')}$ {cmd}")
        if resp:
            out(resp)

    out("\n--- REPLAY END ---\n")


def verify(events):
    """Re-run each session's commands on a fresh tree.

    Returns ``(event, actual)`` pairs for every response that differs from
    the recorded one.
    """
    sessions = {}
    mismatches = []
    for e in events:
        session = sessions.setdefault(e.get("session"), Session(color=False))
        actual = strip_markup(session.run(e["cmd"]))
        # an editor left open by nano would swallow keys, not commands
        session.close_editor()
        if actual != e["resp"]:
            mismatches.append((e, actual))
    return mismatches


def main(argv=None):
    parser = argparse.ArgumentParser(description="Replay Terminux session transcripts.")
    parser.add_argument("logfile", help="Path to JSONL transcript file")
    parser.add_argument("--session", help="Replay only this session ID", default=None)
    parser.add_argument("--fast", action="store_true", help="Skip real-time delays")
    parser.add_argument("--verify", action="store_true",
                        help="Re-run the commands and report responses that changed")

    args = parser.parse_args(argv)
    events = load_events(args.logfile, args.session)

    if args.verify:
        mismatches = verify(events)
        for e, actual in mismatches:
            print(f"[{e.get('session')}] {e['cmd']}")
            print(f"  recorded: {e['resp']!r}")
            print(f"  replayed: {actual!r}")
        print(f"{len(events) - len(mismatches)}/{len(events)} responses match")
        return 1 if mismatches else 0

    replay(events, realtime=not args.fast)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
