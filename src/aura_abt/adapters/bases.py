"""
Abstract Base Classes for Chain Adapters

Defines the two collaborator interfaces the permit tools consume: a signing
wallet that holds keys, and a chain client that submits contract calls.
Concrete Cosmos implementations live in ``adapters.cosmos``.

Core Classes:
    - OfflineAminoSigner: Key holder that lists accounts and signs amino sign docs
    - ChainClientFactory: Uploads code, instantiates, executes and queries contracts
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..schemas.bases import BaseTransactionConfirmation


@dataclass(frozen=True)
class AccountData:
    """
    An account held by a signer.

    Attributes:
        address: Bech32 address.
        pubkey: Compressed secp256k1 public key (33 bytes).
        algo: Key algorithm.
    """
    address: str
    pubkey: bytes
    algo: str = "secp256k1"


@dataclass(frozen=True)
class StdSignature:
    """Raw signing output: compressed public key and 64-byte ``r || s``."""
    pub_key: bytes
    signature: bytes


class OfflineAminoSigner(ABC):
    """
    Abstract key holder able to sign amino JSON sign docs.

    Implementations may keep keys in process (mnemonic wallets) or delegate
    to a remote key holder. A remote implementation raises ``TransportError``
    when it cannot reach the key holder.
    """

    @abstractmethod
    def get_accounts(self) -> List[AccountData]:
        """
        List the accounts this signer holds, in derivation order.

        Returns:
            List[AccountData]: Accounts with address and public key.
        """
        pass

    @abstractmethod
    def sign_amino(self, signer_address: str, sign_doc) -> StdSignature:
        """
        Sign ``sign_doc`` with the key behind ``signer_address``.

        Args:
            signer_address: Bech32 address of one of ``get_accounts()``.
            sign_doc: ``StdSignDoc`` to sign.

        Returns:
            StdSignature: Public key and signature bytes.

        Raises:
            SigningError: If the signer holds no such account or the key
                cannot sign.
        """
        pass


class ChainClientFactory(ABC):
    """
    Abstract CosmWasm chain client.

    Every submitting method blocks until the transaction is included (or the
    broadcast timeout elapses) and returns a confirmation. Failures raise
    instead of returning a failed confirmation:

    - ``TransportError``: endpoint unreachable, query or inclusion timeout.
    - ``ChainRejectionError``: the chain refused or reverted the transaction.
    """

    @abstractmethod
    def upload(
        self,
        sender: OfflineAminoSigner,
        wasm_path: str,
        *,
        gas_limit: Optional[int] = None,
        memo: str = "",
    ) -> BaseTransactionConfirmation:
        """
        Store compiled contract code; the confirmation carries the code ID.
        """
        pass

    @abstractmethod
    def instantiate(
        self,
        sender: OfflineAminoSigner,
        code_id: int,
        init_msg: Dict[str, Any],
        *,
        label: str,
        gas_limit: Optional[int] = None,
        admin: Optional[str] = None,
    ) -> BaseTransactionConfirmation:
        """
        Instantiate stored code; the confirmation carries the contract address.
        """
        pass

    @abstractmethod
    def execute(
        self,
        sender: OfflineAminoSigner,
        contract_address: str,
        payload: Dict[str, Any],
        *,
        gas_limit: Optional[int] = None,
        memo: str = "",
        funds: Optional[str] = None,
    ) -> BaseTransactionConfirmation:
        """
        Execute ``payload`` on ``contract_address`` from the sender's first account.
        """
        pass

    @abstractmethod
    def query(self, contract_address: str, query_msg: Dict[str, Any]) -> Any:
        """
        Run a smart query and return the decoded JSON response.
        """
        pass
