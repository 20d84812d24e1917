import argparse
import logging
import sys

from .core import DEFAULT_PARAMS, Params
from .session import Event, Session
from .terminal import Terminal, TerminalError
from .view import render

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def add_params(parser: argparse.ArgumentParser):
    d = DEFAULT_PARAMS
    parser.add_argument("--S", type=float, default=d.S, help="spot price")
    parser.add_argument("--K", type=float, default=d.K, help="strike")
    parser.add_argument("--T", type=float, default=d.T, help="years")
    parser.add_argument("--r", type=float, default=d.r, help="cont. risk-free")
    parser.add_argument("--q", type=float, default=d.q, help="cont. dividend yield")
    parser.add_argument("--sigma", type=float, default=d.v, help="volatility")


def setup_logging(level: str, log_file=None):
    # The interactive screen owns stdout/stderr; logs only go to a file.
    if log_file is None:
        logging.getLogger("optheat").addHandler(logging.NullHandler())
        return
    logging.basicConfig(filename=log_file, level=getattr(logging, level), format=LOG_FORMAT)


def run(session: Session, term: Terminal):
    """Event loop: one key, one transition, one frame."""
    term.draw(render(session))
    for key in term.keys():
        event = Event.from_key(key)
        if event is None:
            continue
        if session.handle(event):
            logger.info("quit requested")
            return
        term.draw(render(session))


def cmd_snapshot(session: Session):
    session.recompute()
    sys.stdout.write(render(session))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="optheat",
        description="Black-Scholes call/put heatmaps over spot and volatility",
    )
    add_params(p)
    p.add_argument("--snapshot", action="store_true",
                   help="print one frame with computed heatmaps and exit")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-file", default=None, help="write logs to this file")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    session = Session(Params(S=args.S, K=args.K, T=args.T, r=args.r, q=args.q, v=args.sigma))
    if args.snapshot:
        cmd_snapshot(session)
        return 0

    try:
        with Terminal() as term:
            run(session, term)
    except TerminalError as exc:
        logger.error("startup failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
