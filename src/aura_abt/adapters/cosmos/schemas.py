"""
Cosmos Adapter Schema Models

Pydantic models for cw4973 permits and CosmWasm transaction results. All
classes inherit from the base schema hierarchy in ``schemas.bases``.

Signature classes:
    - PermitSignature: The wire envelope ``{hrp, pub_key, signature}`` that
      the contract's ``take`` / ``give`` messages carry.

Permit classes:
    - AgreementPermit: An agreement (active, passive, uri) together with its
      envelope. Used by the offline ``sign`` / ``verify`` commands; the
      contract only ever sees the envelope.

Result / confirmation classes:
    - CosmosVerificationResult: Offline verification outcome.
    - CosmWasmTransactionConfirmation: Included transaction summary.
"""

import base64
import binascii
import json
from typing import Optional, Dict, Any, Literal, Union

from pydantic import ConfigDict, Field, ValidationError

from ...engine.exceptions import PermitFormatError
from ...schemas.bases import (
    BaseSignature,
    BasePermit,
    BaseVerificationResult,
    BaseTransactionConfirmation,
)
from ...schemas.versions import AgreementVersion, LATEST_AGREEMENT_VERSION

#: Compressed secp256k1 public key length.
COMPRESSED_PUBKEY_SIZE = 33
#: ``r || s`` signature length.
SIGNATURE_SIZE = 64


def _b64decode(value: str, field_name: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PermitFormatError(f"{field_name} is not valid base64: {e}")


class PermitSignature(BaseSignature):
    """
    Permit envelope carried by cw4973 ``take`` and ``give`` messages.

    The envelope is opaque: it holds no reference to the agreement it signs,
    so a verifier must rebuild the canonical message from its own inputs.
    Instances are immutable.

    Attributes:
        hrp: Bech32 prefix the contract uses to turn ``pub_key`` into an address.
        pub_key: Base64 compressed secp256k1 public key (33 bytes).
        signature: Base64 ``r || s`` signature (64 bytes).

    Example::

        envelope = PermitSignature(hrp="aura", pub_key="A+...", signature="kZ...")
        envelope.to_dict()  # {"hrp": "aura", "pub_key": "A+...", "signature": "kZ..."}
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signature_type: Literal["secp256k1"] = Field(default="secp256k1", exclude=True)
    hrp: str = Field(..., description="Bech32 address prefix of the signer")
    pub_key: str = Field(..., description="Base64 compressed secp256k1 public key")
    signature: str = Field(..., description="Base64 r||s secp256k1 signature")

    @classmethod
    def from_json(cls, payload: Union[str, bytes, Dict[str, Any]]) -> "PermitSignature":
        """
        Parse an envelope from a JSON document or an already decoded dict.

        Raises:
            PermitFormatError: If the document is not a valid envelope.
        """
        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
            return cls.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise PermitFormatError(f"Invalid permit envelope: {e}")

    def pub_key_bytes(self) -> bytes:
        return _b64decode(self.pub_key, "pub_key")

    def signature_bytes(self) -> bytes:
        return _b64decode(self.signature, "signature")

    def validate_format(self) -> bool:
        """
        Check that both fields decode to the sizes secp256k1 produces.

        Returns:
            True when both components pass.

        Raises:
            PermitFormatError: On the first failed check.
        """
        pub_key = self.pub_key_bytes()
        if len(pub_key) != COMPRESSED_PUBKEY_SIZE:
            raise PermitFormatError(
                f"Invalid pub_key: expected {COMPRESSED_PUBKEY_SIZE} bytes, got {len(pub_key)}"
            )
        signature = self.signature_bytes()
        if len(signature) != SIGNATURE_SIZE:
            raise PermitFormatError(
                f"Invalid signature: expected {SIGNATURE_SIZE} bytes, got {len(signature)}"
            )
        return True


class AgreementPermit(BasePermit):
    """
    A signed cw4973 agreement.

    Attributes:
        permit_type: Always ``"cw4973"``.
        chain_id: Chain ID placed in the sign doc.
        active: Address of the party that will submit the contract call.
        passive: Address of the signer.
        uri: Token URI being agreed on.
        version: Agreement descriptor version.
        signature: Envelope produced by the passive party.
    """

    permit_type: Literal["cw4973"] = Field(default="cw4973", description="Permit standard identifier")
    chain_id: str = Field(..., description="Chain ID bound into the sign doc")
    active: str = Field(..., description="Active party address")
    passive: str = Field(..., description="Passive party (signer) address")
    uri: str = Field(..., description="Token URI")
    version: AgreementVersion = Field(default=LATEST_AGREEMENT_VERSION, description="Agreement descriptor version")
    signature: PermitSignature = Field(..., description="Permit envelope")

    def validate_structure(self) -> bool:
        """
        Validate the embedded envelope.

        Addresses are not checked here; the contract rejects malformed ones.

        Raises:
            PermitFormatError: If the envelope does not decode.
        """
        return self.signature.validate_format()


class CosmosVerificationResult(BaseVerificationResult):
    """
    Outcome of checking a permit envelope against an agreement.

    Attributes:
        verification_type: Always ``"cosmos"``.
        expected_signer: The passive address the agreement names.
        signer_address: Address derived from the envelope's public key, when
            the key decoded.
    """

    verification_type: Literal["cosmos"] = Field(default="cosmos")
    expected_signer: str = Field(..., description="Passive address from the agreement")
    signer_address: Optional[str] = Field(None, description="Address derived from pub_key")


class CosmWasmTransactionConfirmation(BaseTransactionConfirmation):
    """
    Summary of an included CosmWasm transaction.

    Attributes:
        confirmation_type: Always ``"cosmwasm"``.
        tx_hash: Transaction hash.
        height: Block height of inclusion.
        code: ABCI result code (0 on success).
        gas_wanted: Gas limit of the transaction.
        gas_used: Gas consumed.
        raw_log: Node log for the transaction.
        code_id: Code ID assigned by a store transaction.
        contract_address: Address created by an instantiate transaction.
    """

    confirmation_type: Literal["cosmwasm"] = Field(default="cosmwasm")
    tx_hash: str = Field(..., description="Transaction hash")
    height: Optional[int] = Field(None, ge=0, description="Inclusion height")
    code: int = Field(default=0, description="ABCI result code")
    gas_wanted: Optional[int] = Field(None, ge=0, description="Gas limit")
    gas_used: Optional[int] = Field(None, ge=0, description="Gas used")
    raw_log: Optional[str] = Field(None, description="Raw node log")
    code_id: Optional[int] = Field(None, description="Stored code ID")
    contract_address: Optional[str] = Field(None, description="Instantiated contract address")
