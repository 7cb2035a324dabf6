from .bases import AccountData, StdSignature, OfflineAminoSigner, ChainClientFactory

__all__ = [
    "AccountData",
    "StdSignature",
    "OfflineAminoSigner",
    "ChainClientFactory",
]
