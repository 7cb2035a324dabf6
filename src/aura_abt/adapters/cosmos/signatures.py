"""
cw4973 Permit Signing

Builds the canonical agreement message, wraps it in an amino sign doc,
obtains a secp256k1 signature from an ``OfflineAminoSigner`` and packages
the result into the ``PermitSignature`` envelope that ``take`` / ``give``
contract calls carry.

Exported helpers
----------------
create_message_to_sign
    Pure function: descriptor + active + passive + uri.

build_agreement_sign_doc
    Low-level helper returning the ``StdSignDoc`` that gets signed, without
    signing. Useful when signing is handled externally.

package_permit_signature
    Encode a raw public key and signature into the wire envelope.

sign_agreement
    All of the above in one call.
"""

import base64
from typing import Optional, Union

from ...schemas.versions import AgreementVersion, LATEST_AGREEMENT_VERSION
from ..bases import OfflineAminoSigner
from .schemas import PermitSignature
from .standards import StdSignDoc, make_adr36_sign_doc

# ---------------------------------------------------------------------------
# Canonical message
# ---------------------------------------------------------------------------

def create_message_to_sign(
    chain_id: str,
    active: str,
    passive: str,
    uri: str,
    version: AgreementVersion = LATEST_AGREEMENT_VERSION,
) -> str:
    """
    Concatenate the agreement descriptor with active, passive and uri.

    ``chain_id`` is accepted for call-site symmetry with the signing helpers
    but is not part of the message; it is bound in the sign doc instead.
    No field is validated and no separator is inserted.

    Example::

        create_message_to_sign("serenity-testnet-001", "addr_active", "addr_passive", "ipfs://token1")
        # 'Agreement(address active,address passive,string tokenURI)addr_activeaddr_passiveipfs://token1'
    """
    return version.descriptor + active + passive + uri


def build_agreement_sign_doc(
    chain_id: str,
    active: str,
    passive: str,
    uri: str,
    *,
    signer: Optional[str] = None,
    version: AgreementVersion = LATEST_AGREEMENT_VERSION,
) -> StdSignDoc:
    """
    Wrap the canonical message in a ``sign/MsgSignData`` amino sign doc.

    Args:
        chain_id: Chain ID written into the sign doc.
        active: Active party address.
        passive: Passive party address.
        uri: Token URI.
        signer: Address recorded as the message signer. Defaults to ``passive``.
        version: Agreement descriptor version.
    """
    message = create_message_to_sign(chain_id, active, passive, uri, version=version)
    return make_adr36_sign_doc(
        signer=signer if signer is not None else passive,
        data=message.encode("utf-8"),
        chain_id=chain_id,
    )


# ---------------------------------------------------------------------------
# Envelope packaging
# ---------------------------------------------------------------------------

def _encode(value: Union[bytes, str]) -> str:
    # Strings are assumed to be encoded already and pass through untouched.
    if isinstance(value, str):
        return value
    return base64.b64encode(value).decode("ascii")


def package_permit_signature(
    pub_key: Union[bytes, str],
    signature: Union[bytes, str],
    hrp: str,
) -> PermitSignature:
    """
    Build the ``{hrp, pub_key, signature}`` envelope.

    Raw bytes are base64 encoded; strings are taken as already encoded and
    copied verbatim. The envelope is not checked against any agreement.
    """
    return PermitSignature(hrp=hrp, pub_key=_encode(pub_key), signature=_encode(signature))


# ---------------------------------------------------------------------------
# Sign + package
# ---------------------------------------------------------------------------

def sign_agreement(
    wallet: OfflineAminoSigner,
    chain_id: str,
    active: str,
    passive: str,
    uri: str,
    *,
    hrp: str,
    signer: Optional[str] = None,
    version: AgreementVersion = LATEST_AGREEMENT_VERSION,
) -> PermitSignature:
    """
    Sign an agreement with ``wallet`` and return the permit envelope.

    Args:
        wallet: Signer holding the passive party's key.
        chain_id: Chain ID bound into the sign doc.
        active: Active party address.
        passive: Passive party address.
        uri: Token URI.
        hrp: Address prefix written into the envelope.
        signer: Wallet address to sign with. Defaults to ``passive``.
        version: Agreement descriptor version.

    Returns:
        PermitSignature: Envelope ready to embed in a contract call.

    Raises:
        SigningError: If the wallet holds no account for the signer.
    """
    signer = signer if signer is not None else passive
    sign_doc = build_agreement_sign_doc(
        chain_id, active, passive, uri, signer=signer, version=version
    )
    std_signature = wallet.sign_amino(signer, sign_doc)
    return package_permit_signature(std_signature.pub_key, std_signature.signature, hrp)
