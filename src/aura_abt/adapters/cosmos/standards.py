import base64
import hashlib
from dataclasses import dataclass, field
from typing import Dict, Any, List

from ...utils import canonical_json


# -----------------------------
# Amino StdFee
# -----------------------------

@dataclass
class StdFee:
    """
    Amino fee object. Off-chain sign docs always carry a zero fee.
    """
    gas: str = "0"
    amount: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": list(self.amount),
            "gas": self.gas,
        }


# -----------------------------
# ADR-036: MsgSignData
# -----------------------------

@dataclass
class MsgSignData:
    """
    Arbitrary-data message from Cosmos ADR-036.

    Attributes:
        signer: Bech32 address of the account producing the signature.
        data: Raw message bytes; base64 encoded in ``to_dict()``.
    """
    signer: str
    data: bytes

    type: str = "sign/MsgSignData"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "value": {
                "data": base64.b64encode(self.data).decode("ascii"),
                "signer": self.signer,
            },
        }


# -----------------------------
# Amino JSON sign doc
# -----------------------------

@dataclass
class StdSignDoc:
    """
    Amino JSON sign doc wrapping one or more amino messages.

    Account number and sequence are fixed to "0" for off-chain signing, so
    the doc never depends on on-chain account state.
    """
    chain_id: str
    msgs: List[MsgSignData]
    account_number: str = "0"
    sequence: str = "0"
    fee: StdFee = field(default_factory=StdFee)
    memo: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_number": self.account_number,
            "chain_id": self.chain_id,
            "fee": self.fee.to_dict(),
            "memo": self.memo,
            "msgs": [msg.to_dict() for msg in self.msgs],
            "sequence": self.sequence,
        }

    def to_sign_bytes(self) -> bytes:
        """Sorted compact JSON with amino's HTML escaping, UTF-8 encoded."""
        serialized = (
            canonical_json(self.to_dict())
            .replace("&", "\\u0026")
            .replace("<", "\\u003c")
            .replace(">", "\\u003e")
        )
        return serialized.encode("utf-8")

    def digest(self) -> bytes:
        """SHA-256 of ``to_sign_bytes()``; this is what secp256k1 signs."""
        return hashlib.sha256(self.to_sign_bytes()).digest()


def make_adr36_sign_doc(signer: str, data: bytes, chain_id: str = "") -> StdSignDoc:
    """Build a single-message sign doc for arbitrary ``data`` signed by ``signer``."""
    return StdSignDoc(chain_id=chain_id, msgs=[MsgSignData(signer=signer, data=data)])
