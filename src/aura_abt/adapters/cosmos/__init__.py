from .client import CosmWasmClient
from .constants import ChainConfig, CHAINS, get_chain_config
from .schemas import (
    PermitSignature,
    AgreementPermit,
    CosmosVerificationResult,
    CosmWasmTransactionConfirmation,
)
from .signatures import (
    create_message_to_sign,
    build_agreement_sign_doc,
    package_permit_signature,
    sign_agreement,
)
from .verifies import verify_agreement, verify_signature_bytes
from .wallet import Secp256k1HdWallet, pubkey_to_address

__all__ = [
    "CosmWasmClient",
    "ChainConfig",
    "CHAINS",
    "get_chain_config",
    "PermitSignature",
    "AgreementPermit",
    "CosmosVerificationResult",
    "CosmWasmTransactionConfirmation",
    "create_message_to_sign",
    "build_agreement_sign_doc",
    "package_permit_signature",
    "sign_agreement",
    "verify_agreement",
    "verify_signature_bytes",
    "Secp256k1HdWallet",
    "pubkey_to_address",
]
