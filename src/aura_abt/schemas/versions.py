from enum import Enum
from typing import Dict


class AgreementVersion(Enum):
    Version1 = "v1"

    @classmethod
    def from_string(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unsupported agreement version: {value}")

    @property
    def descriptor(self) -> str:
        return AGREEMENT_DESCRIPTORS[self]


# Descriptors are part of the signed bytes. Add a new version instead of editing one.
AGREEMENT_DESCRIPTORS: Dict[AgreementVersion, str] = {
    AgreementVersion.Version1: "Agreement(address active,address passive,string tokenURI)",
}

LATEST_AGREEMENT_VERSION = AgreementVersion.Version1
