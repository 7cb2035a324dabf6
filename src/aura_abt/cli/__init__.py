"""
aura-abt: deploy and drive a cw4973 (account bound token) contract.

Usage:
  aura-abt [--chain NAME] [--log-level LEVEL] store [--wasm PATH]
  aura-abt instantiate CODE_ID
  aura-abt mint CONTRACT URI
  aura-abt give CONTRACT URI
  aura-abt transfer CONTRACT TOKEN_ID RECIPIENT
  aura-abt unequip CONTRACT TOKEN_ID
  aura-abt sign URI --active ADDRESS [--passive ADDRESS] [--signer deployer|tester]
  aura-abt verify ACTIVE PASSIVE URI PERMIT_JSON

Environment:
  CHAIN_ID         chain record name (local, local-docker, serenity, aura-testnet, euphoria)
  MNEMONIC         deployer / minter mnemonic
  TESTER_MNEMONIC  tester / receiver mnemonic

stdout: JSON result. exit 0 on success, 1 on failure or failed verification.
"""

import argparse
import json
from pathlib import Path
from typing import Any, Callable, List, Optional

from ..adapters.cosmos.client import CosmWasmClient
from ..adapters.cosmos.constants import (
    CHAINS,
    DEFAULT_WASM_PATH,
    ChainConfig,
    get_chain_config,
    get_mnemonic_from_env,
    get_tester_mnemonic_from_env,
)
from ..adapters.cosmos.schemas import PermitSignature
from ..adapters.cosmos.wallet import Secp256k1HdWallet
from ..engine.exceptions import BaseException as AbtError, ConfigurationError
from ..schemas.bases import CanonicalModel
from ..utils import error_context, logger, setup_logger
from . import commands


def _wallet_factory(config: ChainConfig, loader: Callable[[], Optional[str]], env_name: str):
    def build() -> Secp256k1HdWallet:
        mnemonic = loader()
        if not mnemonic:
            raise ConfigurationError(f"{env_name} is not set")
        return Secp256k1HdWallet.from_mnemonic(mnemonic, prefix=config.prefix)
    return build


def build_context(config: ChainConfig) -> commands.OperationContext:
    return commands.OperationContext(
        config=config,
        client_factory=CosmWasmClient,
        deployer_factory=_wallet_factory(config, get_mnemonic_from_env, "MNEMONIC"),
        tester_factory=_wallet_factory(config, get_tester_mnemonic_from_env, "TESTER_MNEMONIC"),
    )


def _read_permit(value: str) -> PermitSignature:
    # "@path" reads the envelope from a file.
    if value.startswith("@"):
        path = Path(value[1:])
        if not path.is_file():
            raise ConfigurationError(f"Permit file not found: {path}")
        value = path.read_text()
    return PermitSignature.from_json(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aura-abt", description="Drive a cw4973 account bound token contract")
    parser.add_argument("--chain", choices=sorted(CHAINS), help="Chain record (default: $CHAIN_ID or serenity)")
    parser.add_argument("--log-level", default="INFO", help="Logging level for stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("store", help="Upload compiled contract code")
    p.add_argument("--wasm", default=DEFAULT_WASM_PATH, help="Path to cw4973.wasm")

    p = sub.add_parser("instantiate", help="Instantiate stored code with the deployer as minter")
    p.add_argument("code_id", type=int)
    p.add_argument("--name", default=commands.messages.DEFAULT_CONTRACT_NAME)
    p.add_argument("--symbol", default=commands.messages.DEFAULT_CONTRACT_SYMBOL)

    p = sub.add_parser("mint", help="Tester takes a token signed by the deployer")
    p.add_argument("contract")
    p.add_argument("uri")

    p = sub.add_parser("give", help="Deployer gives a token signed by the tester")
    p.add_argument("contract")
    p.add_argument("uri")

    p = sub.add_parser("transfer", help="Transfer a token from the tester")
    p.add_argument("contract")
    p.add_argument("token_id")
    p.add_argument("recipient")

    p = sub.add_parser("unequip", help="Burn a token owned by the tester")
    p.add_argument("contract")
    p.add_argument("token_id")

    p = sub.add_parser("sign", help="Sign an agreement offline and print the permit")
    p.add_argument("uri")
    p.add_argument("--active", required=True, help="Active party address")
    p.add_argument("--passive", help="Passive party address (default: signer's address)")
    p.add_argument("--signer", choices=("deployer", "tester"), default="deployer")

    p = sub.add_parser("verify", help="Verify a permit envelope against an agreement")
    p.add_argument("active")
    p.add_argument("passive")
    p.add_argument("uri")
    p.add_argument("permit", help="Envelope JSON, or @file")

    return parser


def run(args: argparse.Namespace, ctx: commands.OperationContext) -> Any:
    if args.command == "store":
        return commands.store(ctx, args.wasm)
    if args.command == "instantiate":
        return commands.instantiate(ctx, args.code_id, name=args.name, symbol=args.symbol)
    if args.command == "mint":
        return commands.mint(ctx, args.contract, args.uri)
    if args.command == "give":
        return commands.give(ctx, args.contract, args.uri)
    if args.command == "transfer":
        return commands.transfer(ctx, args.contract, args.token_id, args.recipient)
    if args.command == "unequip":
        return commands.unequip(ctx, args.contract, args.token_id)
    if args.command == "sign":
        wallet = ctx.deployer if args.signer == "deployer" else ctx.tester
        return commands.sign_permit(ctx.config, wallet, args.active, args.uri, passive=args.passive)
    if args.command == "verify":
        envelope = _read_permit(args.permit)
        return commands.verify_permit(ctx.config, args.active, args.passive, args.uri, envelope)
    raise ConfigurationError(f"Unknown command: {args.command}")


def _emit(result: Any) -> None:
    if isinstance(result, CanonicalModel):
        result = result.to_dict()
    print(json.dumps(result, indent=2, default=str))


def main(argv: Optional[List[str]] = None, context_builder=build_context) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(level=args.log_level)
    try:
        ctx = context_builder(get_chain_config(args.chain))
        result = run(args, ctx)
    except AbtError as e:
        logger.error(f"{args.command} failed at {error_context()}: {type(e).__name__}: {e}")
        return 1

    _emit(result)
    if args.command == "verify" and not result.is_success():
        return 1
    return 0
