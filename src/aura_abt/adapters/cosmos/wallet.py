"""
Cosmos HD Wallet

In-process secp256k1 wallet derived from a BIP-39 mnemonic at the Cosmos
path ``m/44'/118'/0'/0/{index}``. Key derivation is delegated to
``eth_account``'s HD support (the curve and BIP-32 rules are the same as
Ethereum's; only the coin type differs). Signing uses ``eth_keys`` over a
SHA-256 digest of the amino sign doc, producing the 64-byte ``r || s``
(low-S) signature Cosmos chains expect.

Addresses are ``bech32(prefix, ripemd160(sha256(compressed_pubkey)))``.
"""

import hashlib
from typing import Dict, Iterable, List, Sequence, Union

import bech32
from Crypto.Hash import RIPEMD160
from eth_account import Account
from eth_keys import keys
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import ValidationError

from ...engine.exceptions import SigningError, WalletDerivationError
from ..bases import AccountData, OfflineAminoSigner, StdSignature
from .constants import COSMOS_HD_PATH_TEMPLATE
from .standards import StdSignDoc


def pubkey_to_address(hrp: str, pubkey: bytes) -> str:
    """
    Derive the bech32 account address of a compressed secp256k1 public key.

    Args:
        hrp: Human-readable prefix, e.g. ``"aura"``.
        pubkey: 33-byte compressed public key.

    Raises:
        WalletDerivationError: If ``hrp`` cannot be used as a bech32 prefix.
    """
    _validate_prefix(hrp)
    sha = hashlib.sha256(pubkey).digest()
    address_bytes = RIPEMD160.new(sha).digest()
    return bech32.bech32_encode(hrp, bech32.convertbits(address_bytes, 8, 5))


def _validate_prefix(prefix: str) -> None:
    if not prefix or len(prefix) > 83:
        raise WalletDerivationError(f"Invalid bech32 prefix: {prefix!r}")
    if prefix != prefix.lower() or any(ord(c) < 33 or ord(c) > 126 for c in prefix):
        raise WalletDerivationError(f"Invalid bech32 prefix: {prefix!r}")


class Secp256k1HdWallet(OfflineAminoSigner):
    """
    Mnemonic-backed amino signer.

    Attributes:
        prefix: Bech32 prefix for account addresses.

    Example:
        wallet = Secp256k1HdWallet.from_mnemonic(mnemonic, prefix="aura")
        account = wallet.get_accounts()[0]
        sig = wallet.sign_amino(account.address, sign_doc)
    """

    def __init__(self, private_keys: Sequence[bytes], prefix: str = "aura"):
        _validate_prefix(prefix)
        if not private_keys:
            raise WalletDerivationError("A wallet needs at least one private key")
        self.prefix = prefix
        self._keys: Dict[str, keys.PrivateKey] = {}
        self._accounts: List[AccountData] = []
        for raw in private_keys:
            try:
                private_key = keys.PrivateKey(bytes(raw))
            except KeyValidationError as e:
                raise WalletDerivationError(f"Invalid private key: {e}")
            pubkey = private_key.public_key.to_compressed_bytes()
            address = pubkey_to_address(prefix, pubkey)
            self._keys[address] = private_key
            self._accounts.append(AccountData(address=address, pubkey=pubkey))

    @classmethod
    def from_mnemonic(
        cls,
        mnemonic: str,
        prefix: str = "aura",
        account_indices: Iterable[int] = (0,),
        passphrase: str = "",
    ) -> "Secp256k1HdWallet":
        """
        Derive one account per index from a BIP-39 mnemonic.

        Raises:
            WalletDerivationError: If the mnemonic is invalid.
        """
        if not mnemonic:
            raise WalletDerivationError("Mnemonic is empty")
        Account.enable_unaudited_hdwallet_features()
        private_keys = []
        for index in account_indices:
            path = COSMOS_HD_PATH_TEMPLATE.format(index=index)
            try:
                account = Account.from_mnemonic(mnemonic, passphrase=passphrase, account_path=path)
            except (ValidationError, ValueError) as e:
                raise WalletDerivationError(f"Cannot derive {path} from mnemonic: {e}")
            private_keys.append(bytes(account.key))
        return cls(private_keys, prefix=prefix)

    @classmethod
    def from_private_key(cls, private_key: Union[bytes, str], prefix: str = "aura") -> "Secp256k1HdWallet":
        if isinstance(private_key, str):
            try:
                private_key = bytes.fromhex(private_key.removeprefix("0x"))
            except ValueError as e:
                raise WalletDerivationError(f"Invalid private key hex: {e}")
        return cls([private_key], prefix=prefix)

    def get_accounts(self) -> List[AccountData]:
        return list(self._accounts)

    def export_private_key(self, address: str) -> bytes:
        """Raw 32-byte key for ``address``; needed by transaction signers."""
        return self._key_for(address).to_bytes()

    def sign_amino(self, signer_address: str, sign_doc: StdSignDoc) -> StdSignature:
        private_key = self._key_for(signer_address)
        try:
            signature = private_key.sign_msg_hash(sign_doc.digest())
        except KeyValidationError as e:
            raise SigningError(f"Key for {signer_address} cannot sign: {e}")
        rs = signature.r.to_bytes(32, "big") + signature.s.to_bytes(32, "big")
        return StdSignature(
            pub_key=private_key.public_key.to_compressed_bytes(),
            signature=rs,
        )

    def _key_for(self, address: str) -> keys.PrivateKey:
        try:
            return self._keys[address]
        except KeyError:
            raise SigningError(f"Address {address} not found in wallet")
