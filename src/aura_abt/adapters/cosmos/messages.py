from typing import Any, Dict, Optional

from .schemas import PermitSignature

DEFAULT_CONTRACT_NAME = "AURA ACCOUNT BOUND"
DEFAULT_CONTRACT_SYMBOL = "AAB"


def instantiate_msg(
    minter: str,
    name: str = DEFAULT_CONTRACT_NAME,
    symbol: str = DEFAULT_CONTRACT_SYMBOL,
) -> Dict[str, Any]:
    return {"name": name, "symbol": symbol, "minter": minter}


def take_msg(from_address: str, uri: str, signature: PermitSignature) -> Dict[str, Any]:
    """Receiver takes a token from the minter, who signed ``signature``."""
    return {
        "take": {
            "from": from_address,
            "uri": uri,
            "signature": signature.to_dict(),
        }
    }


def give_msg(to: str, uri: str, signature: PermitSignature) -> Dict[str, Any]:
    """Minter gives a token to ``to``, who signed ``signature``."""
    return {
        "give": {
            "to": to,
            "uri": uri,
            "signature": signature.to_dict(),
        }
    }


def transfer_nft_msg(recipient: str, token_id: str) -> Dict[str, Any]:
    return {"transfer_nft": {"recipient": recipient, "token_id": token_id}}


def unequip_msg(token_id: str) -> Dict[str, Any]:
    return {"unequip": {"token_id": token_id}}


# Queries

def nft_info_query(token_id: str) -> Dict[str, Any]:
    return {"nft_info": {"token_id": token_id}}


def owner_of_query(token_id: str) -> Dict[str, Any]:
    return {"owner_of": {"token_id": token_id}}


def tokens_query(owner: str, limit: Optional[int] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"owner": owner}
    if limit is not None:
        query["limit"] = limit
    return {"tokens": query}
