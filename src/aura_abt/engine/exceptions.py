"""
Exception and Error Definitions Module

Defines the exception hierarchy for wallet derivation, permit signing and
chain interaction. All exceptions inherit from BaseException for unified
exception handling at the command-line boundary.

Exception Hierarchy:
    BaseException (root)
    ├── ConfigurationError
    ├── WalletDerivationError
    ├── SigningError
    ├── PermitFormatError
    └── BlockchainInteractionError
        ├── TransportError
        └── ChainRejectionError
"""


class BaseException(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions should inherit from this class to enable
    unified exception handling and centralized error processing.
    """
    pass


class ConfigurationError(BaseException):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Unknown chain name in the CHAIN_ID environment variable
    - Missing MNEMONIC / TESTER_MNEMONIC
    - Compiled contract file not found
    """
    pass


class WalletDerivationError(BaseException):
    """
    Raised when a wallet cannot be derived from its seed material.

    This includes scenarios such as:
    - Mnemonic with unknown words or a bad checksum
    - Invalid HD derivation path
    - Invalid bech32 address prefix
    """
    pass


class SigningError(BaseException):
    """
    Raised when a signature cannot be produced.

    This includes scenarios such as:
    - The wallet holds no account for the requested signer address
    - The key refuses to sign the digest
    """
    pass


class PermitFormatError(BaseException):
    """
    Raised when a permit envelope cannot be parsed.

    This includes scenarios such as:
    - pub_key / signature that are not valid base64
    - Missing envelope keys in a JSON document
    """
    pass


class BlockchainInteractionError(BaseException):
    """
    Raised when interaction with the chain endpoint fails.

    Attributes:
        tx_hash: Transaction hash if one was assigned
    """

    def __init__(self, message: str, tx_hash: str = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class TransportError(BlockchainInteractionError):
    """
    Raised when the endpoint cannot be reached or does not answer in time.

    This includes scenarios such as:
    - REST endpoint unreachable or non-2xx
    - Query timeout
    - Transaction not included before the broadcast timeout
    """
    pass


class ChainRejectionError(BlockchainInteractionError):
    """
    Raised when the chain refuses a transaction.

    This includes scenarios such as:
    - Contract execution reverted (e.g. invalid permit signature)
    - Out of gas or insufficient fees
    - CheckTx rejection on broadcast

    Attributes:
        tx_hash: Transaction hash if available
        raw_log: Log returned by the node
    """

    def __init__(self, message: str, tx_hash: str = None, raw_log: str = None):
        super().__init__(message, tx_hash=tx_hash)
        self.raw_log = raw_log
