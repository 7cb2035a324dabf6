"""
Base Schema Models for the ABT Permit Tools

This module defines the fundamental base classes that all other schema models
inherit from. It provides the foundation for type safety, validation, and
consistent serialization of permits, verification results and transaction
confirmations.

Core Classes:
    - CanonicalModel: Pydantic base model with canonical JSON serialization
    - BaseSignature: Abstract signature component model
    - BasePermit: Abstract signed-agreement model
    - BaseVerificationResult: Abstract verification result model
    - BaseTransactionConfirmation: Abstract transaction confirmation model

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Optional, Dict, Any, List
from abc import ABC
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    The canonical form has sorted keys and no insignificant whitespace, so two
    equal models always serialize to the same bytes.

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string.

        ``model_dump(mode="json")`` turns enums, datetimes and nested models
        into plain JSON types; ``json.dumps`` then sorts keys and drops
        whitespace.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump(mode="json", by_alias=True)


class BaseSignature(CanonicalModel, ABC):
    """
    Abstract base class for signature components.

    Attributes:
        signature_type: The signing scheme (e.g. "secp256k1")
    """

    signature_type: str = Field(..., description="Signing scheme (e.g. secp256k1)")

    def validate_format(self) -> bool:
        """
        Validate the signature encoding for the scheme.

        Returns:
            bool: True if signature format is valid.

        Raises:
            ValueError: If signature format is invalid with descriptive message.
        """
        pass


class BasePermit(CanonicalModel, ABC):
    """
    Abstract base class for signed off-chain agreements.

    A permit is a signed message that authorizes a contract call on behalf of
    the signer. Concrete permits add the agreement fields.

    Attributes:
        permit_type: Type of permit (e.g. "cw4973")
        signature: Signature components for permit authorization
        created_at: Timestamp when permit was created
    """

    permit_type: str = Field(..., description="Type of permit (e.g. cw4973)")
    signature: Optional[BaseSignature] = Field(None, description="Signature components")
    created_at: datetime = Field(default_factory=datetime.now, description="Permit creation timestamp")

    def validate_structure(self) -> bool:
        """
        Validate the permit structure and required fields.

        Returns:
            bool: True if permit structure is valid.

        Raises:
            ValueError: If permit structure is invalid with descriptive message.
        """
        pass


class VerificationStatus(str, Enum):
    """
    Enumeration of possible verification result statuses.

    Attributes:
        SUCCESS: Signature is valid and was produced by the expected signer
        INVALID_SIGNATURE: Signature does not match the recomputed message
        INVALID_SIGNER: Signature is valid but the key belongs to another address
        MALFORMED: Public key or signature could not be decoded
    """
    SUCCESS = "success"
    INVALID_SIGNATURE = "invalid_signature"
    INVALID_SIGNER = "invalid_signer"
    MALFORMED = "malformed"


class BaseVerificationResult(CanonicalModel, ABC):
    """
    Abstract base class for permit signature verification results.

    Attributes:
        verification_type: Type of verification (e.g. "cosmos")
        status: Verification result status (VerificationStatus enum)
        is_valid: Boolean indicating if verification was successful
        message: Human-readable status message
        error_details: Detailed error information if verification failed
        verified_at: Timestamp when verification was performed
    """

    verification_type: str = Field(..., description="Type of verification (e.g. cosmos)")
    status: VerificationStatus = Field(..., description="Verification result status")
    is_valid: bool = Field(..., description="Whether the permit verified")
    message: str = Field(..., description="Human-readable status message")
    error_details: Optional[Dict[str, Any]] = Field(None, description="Detailed error information")
    verified_at: datetime = Field(default_factory=datetime.now, description="Verification timestamp")

    def is_success(self) -> bool:
        """
        Check if verification was successful.

        Returns:
            bool: True if verification was successful, False otherwise.
        """
        return self.is_valid and self.status == VerificationStatus.SUCCESS

    def get_error_message(self) -> Optional[str]:
        """
        Get formatted error message from verification result.

        Returns:
            Optional[str]: Error message if verification failed, None if successful.
        """
        if self.is_success():
            return None

        error_msg = f"Verification failed: {self.message}"
        if self.error_details:
            details_str = json.dumps(self.error_details, indent=2)
            error_msg += f"\nDetails: {details_str}"
        return error_msg


class TransactionStatus(str, Enum):
    """
    Enumeration of possible transaction execution statuses.

    Attributes:
        SUCCESS: Transaction executed successfully on-chain
        FAILED: Transaction was included but execution failed
        PENDING: Transaction is pending confirmation
    """
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"


class BaseTransactionConfirmation(CanonicalModel, ABC):
    """
    Abstract base class for transaction confirmation/receipt data.

    Attributes:
        confirmation_type: Type of confirmation (e.g. "cosmwasm")
        status: Transaction execution status (TransactionStatus enum)
        error_message: Error message if transaction failed
        logs: Optional transaction events
        created_at: Timestamp when confirmation was recorded
    """

    confirmation_type: str = Field(..., description="Type of confirmation (e.g. cosmwasm)")
    status: TransactionStatus = Field(..., description="Transaction execution status")
    error_message: Optional[str] = Field(None, description="Error message if transaction failed")
    logs: Optional[List[Dict[str, Any]]] = Field(None, description="Transaction events")
    created_at: datetime = Field(default_factory=datetime.now, description="Confirmation recording timestamp")

    def is_success(self) -> bool:
        """
        Check if transaction executed successfully on-chain.

        Returns:
            bool: True if transaction succeeded, False if failed or pending.
        """
        return self.status == TransactionStatus.SUCCESS

    def get_confirmation_status(self) -> str:
        """
        Get human-readable confirmation status message.

        Returns:
            str: Human-readable status message describing transaction state.
        """
        if self.status == TransactionStatus.SUCCESS:
            return "Transaction confirmed"
        elif self.status == TransactionStatus.PENDING:
            return "Transaction is pending confirmation"
        else:
            return f"Transaction failed: {self.error_message or self.status.value}"
