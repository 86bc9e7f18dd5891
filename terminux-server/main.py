import argparse
import logging

import settings
from shell import Session, run_tasks
from ssh_server import start_ssh_server


def build_parser():
    parser = argparse.ArgumentParser(description="Terminux: a toy Unix shell served over SSH.")
    parser.add_argument("--host", default=settings.SSH_HOST, help="Address to bind")
    parser.add_argument("--port", type=int, default=settings.SSH_PORT, help="SSH port")
    parser.add_argument("--host-key", default=settings.HOST_KEY_PATH, help="RSA host key file")
    parser.add_argument("--log-dir", default=settings.LOG_DIR, help="Transcript directory")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--script", help="Run the commands in this file instead of serving")
    parser.add_argument("--delay", type=float, default=settings.TASK_DELAY,
                        help="Seconds between commands with --script")
    return parser


def run_script(path, color=True, delay=0.0, out=print):
    with open(path, "r") as f:
        lines = f.read().splitlines()

    session = Session(color=color)
    for chunk in run_tasks(session, lines, delay=delay):
        out(chunk)
    return session


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    color = settings.COLOR and not args.no_color

    if args.script:
        run_script(args.script, color=color, delay=args.delay)
        return

    start_ssh_server(args.host, args.port, args.host_key, args.log_dir, color)


if __name__ == "__main__":
    main()
