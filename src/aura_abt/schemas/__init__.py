from .bases import CanonicalModel, BaseSignature, BasePermit, VerificationStatus, BaseVerificationResult, TransactionStatus, BaseTransactionConfirmation
from .versions import AgreementVersion, AGREEMENT_DESCRIPTORS, LATEST_AGREEMENT_VERSION

__all__ = [
    "CanonicalModel",
    "BaseSignature",
    "BasePermit",
    "VerificationStatus",
    "BaseVerificationResult",
    "TransactionStatus",
    "BaseTransactionConfirmation",
    "AgreementVersion",
    "AGREEMENT_DESCRIPTORS",
    "LATEST_AGREEMENT_VERSION",
]
