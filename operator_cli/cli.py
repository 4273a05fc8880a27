"""Operator CLI: fund a seed address and forward it through fresh addresses."""

from __future__ import annotations

import argparse
import logging
import time
from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Optional

from execution_adapter.ethereum.client import LedgerClient, Web3LedgerClient
from execution_adapter.ethereum.networks import NETWORKS, ConfigurationError, resolve_network
from execution_adapter.ethereum.simulator import SimulatedLedger
from forwarding_controller.controller import ForwardingController, is_affirmative
from forwarding_controller.reporter import SessionReporter

from operator_cli.session_log import SessionLog, open_session_log

DEFAULT_COUNT = 5
DRY_RUN_DEPOSIT = Decimal("1")
EXIT_INTERRUPTED = 130

_read_answer: Callable[[str], str] = input
_sleep: Callable[[float], None] = time.sleep


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="address-creator",
        description="Create a chain of addresses and forward native currency through them.",
    )
    parser.add_argument("network", nargs="?", help=f"one of: {', '.join(NETWORKS)}")
    parser.add_argument("count", nargs="?", help=f"addresses to create (default {DEFAULT_COUNT})")
    parser.add_argument(
        "--log-dir",
        default="logs",
        help="directory for the session log; the log holds private keys in cleartext",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="use an in-memory ledger; confirming the deposit credits the seed",
    )
    args = parser.parse_args(argv)

    session = open_session_log(Path(args.log_dir))
    log = session.logger
    try:
        return _run(args, session)
    except KeyboardInterrupt:
        log.error("Interrupted by operator; funds remain at the last funded address.")
        return EXIT_INTERRUPTED
    except Exception as exc:
        log.exception("Script execution failed: %s", exc)
        return 1
    finally:
        session.close()


def _run(args: argparse.Namespace, session: SessionLog) -> int:
    log = session.logger
    log.info("Address Creator Script")
    log.info("Network: %s", args.network)
    count = _parse_count(args.count)
    log.info("Address count: %d", count)
    log.info("Log file: %s", session.path)

    network = resolve_network(args.network)
    prompt = _read_answer
    ledger: LedgerClient
    if args.dry_run:
        simulated = SimulatedLedger()
        ledger = simulated
        prompt = _simulated_deposit(simulated, _read_answer, log)
    else:
        ledger = Web3LedgerClient(network)

    controller = ForwardingController(
        ledger,
        prompt=prompt,
        sleep=_sleep,
        logger=log,
        network=network,
    )
    seed = controller.prepare_seed()
    chain = controller.forward(seed, count)
    SessionReporter(ledger, logger=log, network=network).report(chain)

    log.info("")
    log.info("=== EXECUTION COMPLETED SUCCESSFULLY ===")
    return 0


def _parse_count(value: Optional[str]) -> int:
    if value is None:
        return DEFAULT_COUNT
    try:
        count = int(value)
    except ValueError:
        raise ConfigurationError(f"Address count must be an integer, got {value!r}") from None
    if count < 0:
        raise ConfigurationError("Address count must be non-negative.")
    return count


def _simulated_deposit(
    ledger: SimulatedLedger,
    read_answer: Callable[[str], str],
    log: logging.Logger,
) -> Callable[[str], str]:
    def prompt(text: str) -> str:
        answer = read_answer(text)
        seed = ledger.generated[0]
        if is_affirmative(answer) and ledger.balance_wei(seed.address) == 0:
            ledger.fund(seed.address, DRY_RUN_DEPOSIT)
            log.info("[dry-run] Credited %s ETH to %s", DRY_RUN_DEPOSIT, seed.address)
        return answer

    return prompt


if __name__ == "__main__":
    raise SystemExit(main())
