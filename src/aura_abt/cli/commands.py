"""
cw4973 Contract Operations

One function per command-line operation. Each takes its collaborators
explicitly (chain record, chain client, wallets) and runs a single linear
sequence: derive accounts, build the message, sign, submit, return the
result. Nothing is retried; every error propagates to the caller.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..adapters.bases import ChainClientFactory, OfflineAminoSigner
from ..adapters.cosmos import messages
from ..adapters.cosmos.constants import ChainConfig, DEFAULT_WASM_PATH
from ..adapters.cosmos.schemas import AgreementPermit, CosmosVerificationResult, PermitSignature
from ..adapters.cosmos.signatures import create_message_to_sign, sign_agreement
from ..adapters.cosmos.verifies import verify_agreement
from ..schemas.bases import BaseTransactionConfirmation
from ..utils import logger

STORE_GAS_LIMIT = 2_500_000
INSTANTIATE_GAS_LIMIT = 200_000
TAKE_GAS_LIMIT = 250_000
GIVE_GAS_LIMIT = 250_000

INSTANTIATE_LABEL = "Instantiate contract"


@dataclass
class OperationContext:
    """
    Collaborators for one command run.

    Wallets are produced by factories so that commands which never touch a
    wallet (``verify``) do not require its mnemonic.
    """
    config: ChainConfig
    client_factory: Callable[[ChainConfig], ChainClientFactory]
    deployer_factory: Callable[[], OfflineAminoSigner]
    tester_factory: Callable[[], OfflineAminoSigner]
    _client: Optional[ChainClientFactory] = field(default=None, repr=False)
    _deployer: Optional[OfflineAminoSigner] = field(default=None, repr=False)
    _tester: Optional[OfflineAminoSigner] = field(default=None, repr=False)

    @property
    def client(self) -> ChainClientFactory:
        if self._client is None:
            self._client = self.client_factory(self.config)
        return self._client

    @property
    def deployer(self) -> OfflineAminoSigner:
        if self._deployer is None:
            self._deployer = self.deployer_factory()
        return self._deployer

    @property
    def tester(self) -> OfflineAminoSigner:
        if self._tester is None:
            self._tester = self.tester_factory()
        return self._tester


def _address(wallet: OfflineAminoSigner) -> str:
    return wallet.get_accounts()[0].address


def store(ctx: OperationContext, wasm_path: str = DEFAULT_WASM_PATH) -> BaseTransactionConfirmation:
    confirmation = ctx.client.upload(
        ctx.deployer, wasm_path, gas_limit=STORE_GAS_LIMIT, memo="Upload cw4973 contract code"
    )
    logger.info(f"stored {wasm_path}: code_id={getattr(confirmation, 'code_id', None)}")
    return confirmation


def instantiate(
    ctx: OperationContext,
    code_id: int,
    name: str = messages.DEFAULT_CONTRACT_NAME,
    symbol: str = messages.DEFAULT_CONTRACT_SYMBOL,
) -> BaseTransactionConfirmation:
    """Instantiate ``code_id`` with the deployer as minter."""
    minter = _address(ctx.deployer)
    confirmation = ctx.client.instantiate(
        ctx.deployer,
        code_id,
        messages.instantiate_msg(minter, name=name, symbol=symbol),
        label=INSTANTIATE_LABEL,
        gas_limit=INSTANTIATE_GAS_LIMIT,
    )
    logger.info(f"instantiated code {code_id}: {getattr(confirmation, 'contract_address', None)}")
    return confirmation


def mint(ctx: OperationContext, contract: str, uri: str) -> Dict[str, Any]:
    """
    Tester takes a token from the deployer.

    The deployer (minter, passive party) signs the agreement; the tester
    (active party) submits ``take`` with that permit.
    """
    tester_address = _address(ctx.tester)
    deployer_address = _address(ctx.deployer)

    message = create_message_to_sign(ctx.config.chain_id, tester_address, deployer_address, uri)
    logger.debug(f"message to sign: {message}")

    permit = sign_agreement(
        ctx.deployer,
        ctx.config.chain_id,
        tester_address,
        deployer_address,
        uri,
        hrp=ctx.config.prefix,
    )
    logger.debug(f"permit signature: {permit.to_dict()}")

    payload = messages.take_msg(deployer_address, uri, permit)
    confirmation = ctx.client.execute(
        ctx.tester, contract, payload, gas_limit=TAKE_GAS_LIMIT, memo="take nft"
    )
    return {"message": message, "execute_msg": payload, "confirmation": confirmation.to_dict()}


def give(ctx: OperationContext, contract: str, uri: str) -> Dict[str, Any]:
    """
    Deployer gives a token to the tester.

    The tester (receiver, passive party) signs the agreement; the deployer
    (minter, active party) submits ``give`` with that permit.
    """
    tester_address = _address(ctx.tester)
    deployer_address = _address(ctx.deployer)

    message = create_message_to_sign(ctx.config.chain_id, deployer_address, tester_address, uri)
    permit = sign_agreement(
        ctx.tester,
        ctx.config.chain_id,
        deployer_address,
        tester_address,
        uri,
        hrp=ctx.config.prefix,
    )

    payload = messages.give_msg(tester_address, uri, permit)
    confirmation = ctx.client.execute(
        ctx.deployer, contract, payload, gas_limit=GIVE_GAS_LIMIT, memo="give nft"
    )
    return {"message": message, "execute_msg": payload, "confirmation": confirmation.to_dict()}


def transfer(ctx: OperationContext, contract: str, token_id: str, recipient: str) -> BaseTransactionConfirmation:
    # cw4973 tokens are soulbound; the contract is expected to reject this.
    return ctx.client.execute(
        ctx.tester, contract, messages.transfer_nft_msg(recipient, token_id), memo="transfer nft"
    )


def unequip(ctx: OperationContext, contract: str, token_id: str) -> Dict[str, Any]:
    """Burn ``token_id`` from the tester's account, reporting state around it."""
    nft_info = ctx.client.query(contract, messages.nft_info_query(token_id))
    logger.info(f"nft_info before unequip: {nft_info}")
    owner = ctx.client.query(contract, messages.owner_of_query(token_id))
    logger.info(f"owner: {owner}")

    confirmation = ctx.client.execute(
        ctx.tester, contract, messages.unequip_msg(token_id), memo="unequip nft"
    )

    remaining = ctx.client.query(contract, messages.tokens_query(_address(ctx.tester)))
    return {
        "nft_info": nft_info,
        "owner": owner,
        "confirmation": confirmation.to_dict(),
        "remaining_tokens": remaining,
    }


def sign_permit(
    config: ChainConfig,
    wallet: OfflineAminoSigner,
    active: str,
    uri: str,
    passive: Optional[str] = None,
) -> AgreementPermit:
    """Sign an agreement offline; ``passive`` defaults to the wallet's address."""
    passive = passive or _address(wallet)
    envelope = sign_agreement(wallet, config.chain_id, active, passive, uri, hrp=config.prefix)
    return AgreementPermit(
        chain_id=config.chain_id,
        active=active,
        passive=passive,
        uri=uri,
        signature=envelope,
    )


def verify_permit(
    config: ChainConfig,
    active: str,
    passive: str,
    uri: str,
    envelope: PermitSignature,
) -> CosmosVerificationResult:
    return verify_agreement(envelope, config.chain_id, active, passive, uri)
