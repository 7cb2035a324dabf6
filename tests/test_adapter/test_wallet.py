"""
HD Wallet Test Suite

Mnemonic derivation, bech32 addresses and amino signing.

Usage:
    pytest tests/test_adapter/test_wallet.py -v
"""

import hashlib

import pytest
from cosmpy.crypto.keypairs import PublicKey as CosmpyPublicKey
from Crypto.Hash import RIPEMD160
import bech32

from test_mocks import (
    MOCK_ABANDON_MNEMONIC,
    MOCK_CHAIN_ID,
    MOCK_DEPLOYER_MNEMONIC,
    MOCK_INVALID_MNEMONIC,
    MOCK_URI,
    address_of,
    create_deployer_wallet,
    create_tester_wallet,
)

from aura_abt.adapters.cosmos.signatures import build_agreement_sign_doc
from aura_abt.adapters.cosmos.verifies import verify_signature_bytes
from aura_abt.adapters.cosmos.wallet import Secp256k1HdWallet, pubkey_to_address
from aura_abt.engine.exceptions import SigningError, WalletDerivationError


class TestPubkeyToAddress:

    def test_matches_manual_derivation(self):
        pubkey = create_deployer_wallet().get_accounts()[0].pubkey
        hashed = RIPEMD160.new(hashlib.sha256(pubkey).digest()).digest()
        expected = bech32.bech32_encode("aura", bech32.convertbits(hashed, 8, 5))
        assert pubkey_to_address("aura", pubkey) == expected

    def test_prefix_changes_address_only(self):
        pubkey = create_deployer_wallet().get_accounts()[0].pubkey
        aura = pubkey_to_address("aura", pubkey)
        cosmos = pubkey_to_address("cosmos", pubkey)
        assert aura.startswith("aura1")
        assert cosmos.startswith("cosmos1")
        assert bech32.bech32_decode(aura)[1] == bech32.bech32_decode(cosmos)[1]

    @pytest.mark.parametrize("prefix", ["", "AURA", "au ra"])
    def test_invalid_prefix(self, prefix):
        with pytest.raises(WalletDerivationError):
            pubkey_to_address(prefix, b"\x02" * 33)


class TestFromMnemonic:

    def test_known_cosmos_vector(self):
        wallet = Secp256k1HdWallet.from_mnemonic(MOCK_ABANDON_MNEMONIC, prefix="cosmos")
        assert address_of(wallet) == "cosmos19rl4cm2hmr8afy4kldpxz3fka4jguq0auqdal4"

    def test_account_shape(self):
        account = create_deployer_wallet().get_accounts()[0]
        assert account.address.startswith("aura1")
        assert account.algo == "secp256k1"
        assert len(account.pubkey) == 33
        assert account.pubkey[0] in (2, 3)
        assert pubkey_to_address("aura", account.pubkey) == account.address

    def test_is_deterministic(self):
        assert address_of(create_deployer_wallet()) == address_of(create_deployer_wallet())

    def test_distinct_mnemonics_distinct_accounts(self):
        assert address_of(create_deployer_wallet()) != address_of(create_tester_wallet())

    def test_account_indices(self):
        wallet = Secp256k1HdWallet.from_mnemonic(MOCK_ABANDON_MNEMONIC, account_indices=(0, 1, 2))
        addresses = [account.address for account in wallet.get_accounts()]
        assert len(set(addresses)) == 3
        first_only = Secp256k1HdWallet.from_mnemonic(MOCK_ABANDON_MNEMONIC)
        assert addresses[0] == address_of(first_only)

    def test_passphrase_changes_keys(self):
        plain = Secp256k1HdWallet.from_mnemonic(MOCK_DEPLOYER_MNEMONIC)
        protected = Secp256k1HdWallet.from_mnemonic(MOCK_DEPLOYER_MNEMONIC, passphrase="secret")
        assert address_of(plain) != address_of(protected)

    def test_prefix(self):
        wallet = create_deployer_wallet(prefix="cosmos")
        assert address_of(wallet).startswith("cosmos1")
        assert wallet.prefix == "cosmos"

    def test_bad_checksum(self):
        with pytest.raises(WalletDerivationError):
            Secp256k1HdWallet.from_mnemonic(MOCK_INVALID_MNEMONIC)

    def test_unknown_words(self):
        with pytest.raises(WalletDerivationError):
            Secp256k1HdWallet.from_mnemonic("these words are not part of any bip thirty nine list at all ok")

    def test_empty(self):
        with pytest.raises(WalletDerivationError):
            Secp256k1HdWallet.from_mnemonic("")

    def test_invalid_prefix(self):
        with pytest.raises(WalletDerivationError):
            Secp256k1HdWallet.from_mnemonic(MOCK_DEPLOYER_MNEMONIC, prefix="")


class TestFromPrivateKey:

    def test_round_trip_through_export(self):
        wallet = create_deployer_wallet()
        address = address_of(wallet)
        raw = wallet.export_private_key(address)
        assert len(raw) == 32
        assert address_of(Secp256k1HdWallet.from_private_key(raw)) == address
        assert address_of(Secp256k1HdWallet.from_private_key("0x" + raw.hex())) == address

    def test_bad_hex(self):
        with pytest.raises(WalletDerivationError):
            Secp256k1HdWallet.from_private_key("zz")

    def test_no_keys(self):
        with pytest.raises(WalletDerivationError):
            Secp256k1HdWallet([])


class TestSignAmino:

    def test_signature_verifies(self):
        wallet = create_deployer_wallet()
        address = address_of(wallet)
        doc = build_agreement_sign_doc(MOCK_CHAIN_ID, "aura1active", address, MOCK_URI)
        signed = wallet.sign_amino(address, doc)
        assert len(signed.signature) == 64
        assert signed.pub_key == wallet.get_accounts()[0].pubkey
        assert verify_signature_bytes(doc.digest(), signed.signature, signed.pub_key)

    def test_signature_accepted_by_cosmpy(self):
        wallet = create_deployer_wallet()
        address = address_of(wallet)
        doc = build_agreement_sign_doc(MOCK_CHAIN_ID, "aura1active", address, MOCK_URI)
        signed = wallet.sign_amino(address, doc)
        assert CosmpyPublicKey(signed.pub_key).verify_digest(doc.digest(), signed.signature)

    def test_unknown_address(self):
        wallet = create_deployer_wallet()
        doc = build_agreement_sign_doc(MOCK_CHAIN_ID, "a", "b", MOCK_URI)
        with pytest.raises(SigningError):
            wallet.sign_amino(address_of(create_tester_wallet()), doc)

    def test_export_unknown_address(self):
        with pytest.raises(SigningError):
            create_deployer_wallet().export_private_key("aura1nobody")
