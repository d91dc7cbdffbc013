"""
Command-line entry for the confidential wager ledger.

Runs against the plaintext development gateway, so only the metadata
commands are meaningful across restarts; `demo` settles fresh bets and
decrypts them as their player to show the full lifecycle.
"""

import argparse
import logging
import sys
from typing import List

from config import DB_PATH, LOG_LEVEL

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)
logger = logging.getLogger("wager_ledger")

from domain.models.bet import EUINT8, EUINT64
from infrastructure.service_container import ServiceConfig, ServiceContainer


def _cmd_stats(container: ServiceContainer, args) -> int:
    stats = container.stats_service.stats()
    volume = "unavailable" if stats.total_volume is None else stats.total_volume
    print(f"Total bets:     {stats.total_bets}")
    print(f"Settled bets:   {stats.settled_bets}")
    print(f"Unique players: {stats.unique_players}")
    print(f"Total volume:   {volume}")
    return 0


def _cmd_summary(container: ServiceContainer, args) -> int:
    summary = container.settlement_service.summary(args.bet_id)
    if summary.player is None:
        print(f"ERROR: Bet {args.bet_id} does not exist", file=sys.stderr)
        return 1
    print(f"Bet {args.bet_id}: player={summary.player} created_at={summary.created_at} state={summary.state.name}")
    return 0


def _cmd_demo(container: ServiceContainer, args) -> int:
    gateway = container.gateway
    if not hasattr(gateway, "encrypt"):
        print("ERROR: demo requires the plaintext development gateway", file=sys.stderr)
        return 2

    wager = gateway.encrypt(args.wager, EUINT64, args.player)
    guess = gateway.encrypt(args.guess, EUINT8, args.player)
    result = container.settlement_service.settle(
        wager.handle, wager.proof, guess.handle, guess.proof, args.player
    )
    if not result.success:
        print(f"ERROR ({result.error_code}): {result.error}", file=sys.stderr)
        return 1

    fields = container.viewer_service.read_encrypted_fields(result.value, args.player).unwrap()
    outcome = gateway.decrypt(fields.outcome, args.player)
    payout = gateway.decrypt(fields.payout, args.player)
    print(f"Bet {result.value}: guess={args.guess} outcome={outcome} payout={payout}")
    return 0


def main(argv: List[str]) -> int:
    parser = argparse.ArgumentParser(description="Confidential even/odd wager ledger.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("stats", help="Show plaintext ledger statistics")

    summary = sub.add_parser("summary", help="Show plaintext metadata for a bet")
    summary.add_argument("bet_id", type=int)

    demo = sub.add_parser("demo", help="Settle one bet on the development gateway")
    demo.add_argument("--player", default="demo-player")
    demo.add_argument("--wager", type=int, default=100)
    demo.add_argument("--guess", type=int, choices=[0, 1], default=0, help="0 = even, 1 = odd")

    args = parser.parse_args(argv)
    logger.debug(f"Using ledger database {args.db_path}")

    container = ServiceContainer(ServiceConfig(db_path=args.db_path))
    container.initialize()

    handlers = {"stats": _cmd_stats, "summary": _cmd_summary, "demo": _cmd_demo}
    return handlers[args.command](container, args)


def _run() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(_run())
