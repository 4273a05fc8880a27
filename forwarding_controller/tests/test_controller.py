"""Unit tests for seed confirmation and the forwarding loop."""

from decimal import Decimal
import logging
import unittest

from execution_adapter.ethereum.client import QueryError
from execution_adapter.ethereum.models import GasEstimate
from execution_adapter.ethereum.networks import BASE_SEPOLIA
from execution_adapter.ethereum.simulator import SimulatedLedger
from forwarding_controller.controller import DEPOSIT_PROMPT, ForwardingController
from forwarding_controller.modes import HopStatus, SeedState
from forwarding_controller.policy import SAFETY_MARGIN_WEI
from wallet_core.generator import GenerationError

ONE_ETH = 10**18


class FixedFeeLedger(SimulatedLedger):
    """Simulated ledger quoting a fixed total gas cost."""

    def __init__(self, gas_cost: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self._fixed = GasEstimate(gas_limit=21_000, gas_price=gas_cost // 21_000, gas_cost=gas_cost)

    def estimate_fee(self) -> GasEstimate:
        self.fee_queries += 1
        return self._fixed


class BrokenGenerator:
    def generate(self):
        raise GenerationError("entropy unavailable")


class ForwardingControllerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.sleeps = []
        self.prompts = []
        self.logger = logging.getLogger("tests.forwarding")

    def _controller(self, ledger, answers=()):
        scripted = list(answers)

        def prompt(text: str) -> str:
            self.prompts.append(text)
            if not scripted:
                raise EOFError("no more input")
            answer = scripted.pop(0)
            return answer(ledger) if callable(answer) else answer

        return ForwardingController(
            ledger,
            prompt=prompt,
            sleep=self.sleeps.append,
            logger=self.logger,
            network=BASE_SEPOLIA,
        )

    def _funded_seed(self, ledger, amount: Decimal = Decimal("1")):
        seed = ledger.generate_account()
        ledger.fund(seed.address, amount)
        return seed


class SeedConfirmationTests(ForwardingControllerTestCase):
    def test_confirmed_deposit_returns_seed(self) -> None:
        ledger = SimulatedLedger()

        def deposit_then_yes(ledger_: SimulatedLedger) -> str:
            ledger_.fund(ledger_.generated[0].address, Decimal("0.5"))
            return "yes"

        controller = self._controller(ledger, [deposit_then_yes])
        seed = controller.prepare_seed()

        self.assertEqual(seed, ledger.generated[0])
        self.assertEqual(controller.seed_state, SeedState.FUNDED)
        self.assertEqual(self.prompts, [DEPOSIT_PROMPT])
        self.assertEqual(self.sleeps, [5])

    def test_yes_with_zero_balance_reprompts(self) -> None:
        ledger = SimulatedLedger()

        def deposit_then_yes(ledger_: SimulatedLedger) -> str:
            ledger_.fund(ledger_.generated[0].address, Decimal("1"))
            return "YES "

        controller = self._controller(ledger, ["yes", "yes", "yes", deposit_then_yes])
        with self.assertLogs(self.logger, level="WARNING") as logs:
            controller.prepare_seed()

        self.assertEqual(len(self.prompts), 4)
        self.assertEqual(self.sleeps, [5, 5, 5, 5])
        self.assertEqual(len(logs.records), 3)
        self.assertTrue(all("No ETH detected" in line for line in logs.output))

    def test_negative_answer_restarts_without_recheck(self) -> None:
        ledger = SimulatedLedger()

        def deposit_then_y(ledger_: SimulatedLedger) -> str:
            ledger_.fund(ledger_.generated[0].address, Decimal("1"))
            return "y"

        controller = self._controller(ledger, ["no", "later", deposit_then_y])
        controller.prepare_seed()

        self.assertEqual(len(self.prompts), 3)
        # one poll per cycle plus the confirmation re-check on the final answer
        self.assertEqual(ledger.balance_queries, 4)

    def test_stale_yes_never_transitions_to_funded(self) -> None:
        ledger = SimulatedLedger()
        controller = self._controller(ledger, ["yes", "yes", "yes"])

        with self.assertRaises(EOFError):
            controller.prepare_seed()

        self.assertEqual(len(self.prompts), 4)
        self.assertEqual(controller.seed_state, SeedState.AWAITING_DEPOSIT)

    def test_seed_key_material_is_logged(self) -> None:
        ledger = SimulatedLedger()

        def deposit_then_yes(ledger_: SimulatedLedger) -> str:
            ledger_.fund(ledger_.generated[0].address, Decimal("1"))
            return "yes"

        controller = self._controller(ledger, [deposit_then_yes])
        with self.assertLogs(self.logger, level="INFO") as logs:
            seed = controller.prepare_seed()

        output = "\n".join(logs.output)
        self.assertIn(seed.address, output)
        self.assertIn(seed.private_key, output)
        self.assertIn(seed.public_key, output)
        self.assertIn(BASE_SEPOLIA.rpc_url, output)

    def test_balance_query_failure_propagates(self) -> None:
        def fail(_: str) -> None:
            raise QueryError("rpc down")

        ledger = SimulatedLedger(on_balance_query=fail)
        controller = self._controller(ledger, ["yes"])
        with self.assertRaises(QueryError):
            controller.prepare_seed()


class ForwardingLoopTests(ForwardingControllerTestCase):
    def test_chain_length_matches_count(self) -> None:
        for count in (0, 1, 4):
            ledger = SimulatedLedger()
            seed = self._funded_seed(ledger)
            chain = self._controller(ledger).forward(seed, count)
            self.assertEqual(len(chain), count)
            self.assertEqual(list(chain), ledger.generated[1:])

    def test_zero_count_does_nothing(self) -> None:
        ledger = SimulatedLedger()
        seed = self._funded_seed(ledger)
        controller = self._controller(ledger)

        self.assertEqual(controller.forward(seed, 0), ())
        self.assertEqual(ledger.transfers, [])
        self.assertEqual(self.sleeps, [])
        self.assertEqual(controller.outcomes, ())

    def test_negative_count_rejected(self) -> None:
        ledger = SimulatedLedger()
        with self.assertRaises(ValueError):
            self._controller(ledger).forward(self._funded_seed(ledger), -1)

    def test_documented_transfer_amount(self) -> None:
        ledger = FixedFeeLedger(gas_cost=10**14)
        seed = self._funded_seed(ledger, Decimal("1.0"))
        controller = self._controller(ledger)

        chain = controller.forward(seed, 2)

        first = ledger.transfers[0]
        self.assertEqual(first.source, seed.address)
        self.assertEqual(first.destination, chain[0].address)
        self.assertEqual(first.value_wei, ONE_ETH - 10**14 - SAFETY_MARGIN_WEI)
        self.assertEqual(controller.outcomes[0].amount, Decimal("0.999899"))
        self.assertEqual(controller.outcomes[1].balance, Decimal("0.999899"))
        self.assertEqual(
            [outcome.status for outcome in controller.outcomes],
            [HopStatus.TRANSFERRED, HopStatus.TRANSFERRED],
        )

    def test_unfunded_hops_skip_transfer_but_advance(self) -> None:
        ledger = SimulatedLedger()
        seed = ledger.generate_account()
        controller = self._controller(ledger)

        chain = controller.forward(seed, 3)

        self.assertEqual(len(chain), 3)
        self.assertEqual(ledger.transfers, [])
        self.assertEqual(ledger.fee_queries, 0)
        self.assertTrue(all(o.status == HopStatus.NO_BALANCE for o in controller.outcomes))
        self.assertTrue(all(ledger.balance_wei(a.address) == 0 for a in chain))
        self.assertEqual(self.sleeps, [2, 2, 2])

    def test_balance_below_gas_cost(self) -> None:
        ledger = SimulatedLedger(base_gas_price=10**9)
        seed = self._funded_seed(ledger, Decimal("0.00000001"))
        controller = self._controller(ledger)

        with self.assertLogs(self.logger, level="WARNING") as logs:
            chain = controller.forward(seed, 1)

        self.assertEqual(controller.outcomes[0].status, HopStatus.INSUFFICIENT_FOR_GAS)
        self.assertEqual(ledger.transfers, [])
        self.assertEqual(len(chain), 1)
        self.assertIn("cover gas", logs.output[0])

    def test_balance_within_safety_margin(self) -> None:
        ledger = SimulatedLedger(base_gas_price=1_000)
        seed = self._funded_seed(ledger, Decimal("0.00000001"))
        controller = self._controller(ledger)

        controller.forward(seed, 1)

        self.assertEqual(controller.outcomes[0].status, HopStatus.INSUFFICIENT_AFTER_MARGIN)
        self.assertEqual(ledger.transfers, [])

    def test_failed_transfer_does_not_halt_chain(self) -> None:
        ledger = SimulatedLedger()
        seed = self._funded_seed(ledger)
        controller = self._controller(ledger)

        generate = ledger.generate_account

        def generate_and_block_second() -> object:
            account = generate()
            if len(ledger.generated) == 3:
                ledger.failing_destinations.add(account.address)
            return account

        ledger.generate_account = generate_and_block_second
        with self.assertLogs(self.logger, level="ERROR") as logs:
            chain = controller.forward(seed, 3)

        statuses = [outcome.status for outcome in controller.outcomes]
        self.assertEqual(
            statuses, [HopStatus.TRANSFERRED, HopStatus.FAILED, HopStatus.NO_BALANCE]
        )
        self.assertEqual(len(chain), 3)
        self.assertIn("Transfer failed", logs.output[0])
        self.assertGreater(ledger.balance_wei(chain[0].address), 0)
        self.assertEqual(ledger.balance_wei(chain[1].address), 0)
        self.assertTrue(controller.outcomes[1].reason)

    def test_gas_is_quoted_fresh_for_every_hop(self) -> None:
        def bump(_: str) -> None:
            ledger.base_gas_price += 1_000

        ledger = SimulatedLedger(base_gas_price=1_000, on_balance_query=bump)
        seed = self._funded_seed(ledger)
        controller = self._controller(ledger)

        controller.forward(seed, 3)

        prices = [outcome.gas_estimate.gas_price for outcome in controller.outcomes]
        self.assertEqual(ledger.fee_queries, 3)
        self.assertEqual(prices, [2_200, 3_300, 4_400])
        self.assertEqual([t.gas_price for t in ledger.transfers], prices)

    def test_generation_failure_propagates(self) -> None:
        ledger = SimulatedLedger(generator=BrokenGenerator())
        seed = SimulatedLedger().generate_account()
        with self.assertRaises(GenerationError):
            self._controller(ledger).forward(seed, 2)

    def test_fee_query_failure_propagates(self) -> None:
        ledger = SimulatedLedger(base_gas_price=None)
        seed = self._funded_seed(ledger)
        with self.assertRaises(QueryError):
            self._controller(ledger).forward(seed, 1)


if __name__ == "__main__":
    unittest.main()
