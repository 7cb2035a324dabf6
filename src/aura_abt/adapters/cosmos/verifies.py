"""
cw4973 Permit Verification

Off-chain counterpart of the contract's agreement check. The envelope
carries no agreement, so the verifier rebuilds the canonical message and
sign doc from its own (chain_id, active, passive, uri), then:

1. verifies the secp256k1 signature over the sign doc digest with the
   envelope's public key, and
2. derives the bech32 address of that key under the envelope's ``hrp`` and
   requires it to equal ``passive``.

Bad signatures are reported through ``CosmosVerificationResult``; nothing
here raises for an invalid permit.
"""

from eth_keys import keys
from eth_keys.datatypes import NonRecoverableSignature
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError

from ...engine.exceptions import PermitFormatError, WalletDerivationError
from ...schemas.bases import VerificationStatus
from ...schemas.versions import AgreementVersion, LATEST_AGREEMENT_VERSION
from .schemas import CosmosVerificationResult, PermitSignature
from .signatures import build_agreement_sign_doc
from .wallet import pubkey_to_address


def verify_signature_bytes(digest: bytes, signature: bytes, pubkey: bytes) -> bool:
    """
    Check a 64-byte ``r || s`` signature over ``digest`` against a compressed key.

    Returns ``False`` for any key or signature that does not parse.
    """
    try:
        public_key = keys.PublicKey.from_compressed_bytes(pubkey)
        sig = NonRecoverableSignature(signature_bytes=signature)
        return public_key.verify_msg_hash(digest, sig)
    except (KeyValidationError, BadSignature, ValueError):
        return False


def verify_agreement(
    permit: PermitSignature,
    chain_id: str,
    active: str,
    passive: str,
    uri: str,
    *,
    version: AgreementVersion = LATEST_AGREEMENT_VERSION,
) -> CosmosVerificationResult:
    """
    Verify ``permit`` as the passive party's signature over the agreement.

    Args:
        permit: Envelope to check.
        chain_id: Chain ID the signer bound into the sign doc.
        active: Active party address.
        passive: Expected signer address.
        uri: Token URI.
        version: Agreement descriptor version used when signing.

    Returns:
        CosmosVerificationResult: ``SUCCESS`` when both checks pass;
        ``MALFORMED``, ``INVALID_SIGNATURE`` or ``INVALID_SIGNER`` otherwise.
    """
    try:
        permit.validate_format()
        pubkey = permit.pub_key_bytes()
        signature = permit.signature_bytes()
        signer_address = pubkey_to_address(permit.hrp, pubkey)
    except (PermitFormatError, WalletDerivationError) as e:
        return CosmosVerificationResult(
            status=VerificationStatus.MALFORMED,
            is_valid=False,
            message="Permit envelope could not be decoded",
            error_details={"error": str(e)},
            expected_signer=passive,
        )

    sign_doc = build_agreement_sign_doc(chain_id, active, passive, uri, version=version)
    if not verify_signature_bytes(sign_doc.digest(), signature, pubkey):
        return CosmosVerificationResult(
            status=VerificationStatus.INVALID_SIGNATURE,
            is_valid=False,
            message="Signature does not match the agreement",
            error_details={"chain_id": chain_id, "active": active, "passive": passive, "uri": uri},
            expected_signer=passive,
            signer_address=signer_address,
        )

    if signer_address != passive:
        return CosmosVerificationResult(
            status=VerificationStatus.INVALID_SIGNER,
            is_valid=False,
            message="Signature was produced by a different account",
            error_details={"expected": passive, "recovered": signer_address},
            expected_signer=passive,
            signer_address=signer_address,
        )

    return CosmosVerificationResult(
        status=VerificationStatus.SUCCESS,
        is_valid=True,
        message="Permit signature verified",
        expected_signer=passive,
        signer_address=signer_address,
    )
