"""
CosmWasm Chain Client

Implements ``ChainClientFactory`` on top of cosmpy's ``LedgerClient`` using
the chain's REST endpoint. Each submitting call builds one message, signs
it with the sender's first account, broadcasts, and waits for inclusion
using the chain record's broadcast timeout and poll interval.

Nothing is retried. cosmpy failures are translated at this boundary:

- ``BroadcastError`` (CheckTx or DeliverTx failure, out of gas, fees)
  -> ``ChainRejectionError``
- ``QueryTimeoutError`` / other query errors, HTTP errors, socket errors
  -> ``TransportError``

Dependencies:
    - cosmpy: transaction building, signing, broadcast and gRPC-gateway queries
"""

import json
import os
from datetime import timedelta
from typing import Any, Dict, List, Optional

from cosmpy.aerial.client import LedgerClient
from cosmpy.aerial.client.utils import prepare_and_broadcast_basic_transaction
from cosmpy.aerial.config import NetworkConfig
from cosmpy.aerial.contract.cosmwasm import (
    create_cosmwasm_execute_msg,
    create_cosmwasm_instantiate_msg,
    create_cosmwasm_store_code_msg,
)
from cosmpy.aerial.exceptions import BroadcastError, QueryError
from cosmpy.aerial.tx import Transaction, TxFee
from cosmpy.aerial.wallet import LocalWallet
from cosmpy.crypto.address import Address
from cosmpy.crypto.keypairs import PrivateKey
from cosmpy.protos.cosmwasm.wasm.v1.query_pb2 import QuerySmartContractStateRequest

from ...engine.exceptions import (
    ChainRejectionError,
    ConfigurationError,
    SigningError,
    TransportError,
)
from ...schemas.bases import TransactionStatus
from ...utils import logger
from ..bases import ChainClientFactory, OfflineAminoSigner
from .constants import ChainConfig
from .schemas import CosmWasmTransactionConfirmation
from .wallet import Secp256k1HdWallet


def _fee(gas_limit: Optional[int]) -> Optional[TxFee]:
    # No limit: cosmpy simulates the transaction and prices the estimate.
    if gas_limit is None:
        return None
    return TxFee(gas_limit=gas_limit)


def _log_attribute(confirmation: CosmWasmTransactionConfirmation, event_type: str, key: str) -> Optional[str]:
    for log in confirmation.logs or []:
        if log["type"] == event_type:
            return log["attributes"].get(key)
    return None


class CosmWasmClient(ChainClientFactory):
    """
    cw4973 chain client bound to one ``ChainConfig``.

    The underlying ``LedgerClient`` is created lazily on first use so that
    constructing the client never touches the network.

    Attributes:
        config: Chain record this client talks to.

    Example:
        client = CosmWasmClient(get_chain_config("serenity"))
        confirmation = client.execute(wallet, contract, take_msg(...), gas_limit=250000, memo="take nft")
        print(confirmation.tx_hash)
    """

    def __init__(self, config: ChainConfig, ledger: Optional[LedgerClient] = None):
        self.config = config
        self._ledger = ledger

    def network_config(self) -> NetworkConfig:
        return NetworkConfig(
            chain_id=self.config.chain_id,
            url=f"rest+{self.config.rest_endpoint}",
            fee_minimum_gas_price=self.config.gas_price,
            fee_denomination=self.config.denom,
            staking_denomination=self.config.denom,
        )

    @property
    def ledger(self) -> LedgerClient:
        if self._ledger is None:
            self._ledger = LedgerClient(self.network_config())
        return self._ledger

    # ------------------------------------------------------------------
    # Submitting operations
    # ------------------------------------------------------------------

    def upload(
        self,
        sender: OfflineAminoSigner,
        wasm_path: str,
        *,
        gas_limit: Optional[int] = None,
        memo: str = "",
    ) -> CosmWasmTransactionConfirmation:
        if not os.path.isfile(wasm_path):
            raise ConfigurationError(f"Compiled contract not found: {wasm_path}")
        wallet = self._local_wallet(sender)
        msg = create_cosmwasm_store_code_msg(wasm_path, wallet.address())
        confirmation = self._submit(wallet, msg, gas_limit=gas_limit, memo=memo)
        code_id = _log_attribute(confirmation, "store_code", "code_id")
        if code_id is not None:
            confirmation = confirmation.model_copy(update={"code_id": int(code_id)})
        return confirmation

    def instantiate(
        self,
        sender: OfflineAminoSigner,
        code_id: int,
        init_msg: Dict[str, Any],
        *,
        label: str,
        gas_limit: Optional[int] = None,
        admin: Optional[str] = None,
    ) -> CosmWasmTransactionConfirmation:
        wallet = self._local_wallet(sender)
        msg = create_cosmwasm_instantiate_msg(
            code_id,
            init_msg,
            label,
            wallet.address(),
            admin_address=Address(admin) if admin else None,
        )
        confirmation = self._submit(wallet, msg, gas_limit=gas_limit, memo="")
        address = _log_attribute(confirmation, "instantiate", "_contract_address")
        if address is not None:
            confirmation = confirmation.model_copy(update={"contract_address": address})
        return confirmation

    def execute(
        self,
        sender: OfflineAminoSigner,
        contract_address: str,
        payload: Dict[str, Any],
        *,
        gas_limit: Optional[int] = None,
        memo: str = "",
        funds: Optional[str] = None,
    ) -> CosmWasmTransactionConfirmation:
        wallet = self._local_wallet(sender)
        msg = create_cosmwasm_execute_msg(
            wallet.address(), Address(contract_address), payload, funds=funds
        )
        logger.debug(f"execute on {contract_address}: {payload}")
        return self._submit(wallet, msg, gas_limit=gas_limit, memo=memo)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, contract_address: str, query_msg: Dict[str, Any]) -> Any:
        request = QuerySmartContractStateRequest(
            address=contract_address,
            query_data=json.dumps(query_msg).encode("utf-8"),
        )
        try:
            response = self.ledger.wasm.SmartContractState(request)
        except (QueryError, RuntimeError, OSError) as e:
            raise TransportError(f"Query {query_msg} on {contract_address} failed: {e}")
        return json.loads(response.data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _local_wallet(self, sender: OfflineAminoSigner) -> LocalWallet:
        if not isinstance(sender, Secp256k1HdWallet):
            raise SigningError(
                f"{type(sender).__name__} cannot sign transactions; an in-process wallet is required"
            )
        address = sender.get_accounts()[0].address
        key = PrivateKey(sender.export_private_key(address))
        return LocalWallet(key, prefix=sender.prefix)

    def _submit(
        self,
        wallet: LocalWallet,
        msg,
        *,
        gas_limit: Optional[int],
        memo: str,
    ) -> CosmWasmTransactionConfirmation:
        tx = Transaction()
        tx.add_message(msg)
        tx_hash = None
        try:
            submitted = prepare_and_broadcast_basic_transaction(
                self.ledger, tx, wallet, fee=_fee(gas_limit), memo=memo or None
            )
            tx_hash = submitted.tx_hash
            logger.info(f"broadcast {tx_hash}, waiting for inclusion")
            submitted.wait_to_complete(
                timeout=timedelta(seconds=self.config.broadcast_timeout),
                poll_period=timedelta(seconds=self.config.broadcast_poll_interval),
            )
        except BroadcastError as e:
            raise ChainRejectionError(
                f"Transaction rejected: {e}",
                tx_hash=getattr(e, "tx_hash", None) or tx_hash,
                raw_log=str(e),
            )
        except (QueryError, RuntimeError, OSError) as e:
            raise TransportError(f"Transaction {tx_hash or '<unsent>'} failed in transport: {e}", tx_hash=tx_hash)

        response = submitted.response
        return CosmWasmTransactionConfirmation(
            status=TransactionStatus.SUCCESS if response.code == 0 else TransactionStatus.FAILED,
            tx_hash=response.hash,
            height=response.height,
            code=response.code,
            gas_wanted=response.gas_wanted,
            gas_used=response.gas_used,
            raw_log=response.raw_log,
            logs=self._events_to_logs(response.events or {}),
        )

    @staticmethod
    def _events_to_logs(events: Dict[str, Dict[str, str]]) -> List[Dict[str, Any]]:
        return [{"type": event_type, "attributes": dict(attrs)} for event_type, attrs in events.items()]
