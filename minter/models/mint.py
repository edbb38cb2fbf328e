import re

from pydantic import BaseModel, ConfigDict, Field

_WHITESPACE = re.compile(r"\s+")


def to_pin_name(title: str) -> str:
    """Replace every whitespace run in a title with a single hyphen."""
    return _WHITESPACE.sub("-", title)


class MintRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    description: str = ""
    creator: str = ""

    @property
    def pin_name(self) -> str:
        return to_pin_name(self.title)


class NftMetadata(BaseModel):
    name: str
    description: str
    symbol: str
    artifactUri: str
    displayUri: str
    creators: list[str]
    decimals: int = 0
    thumbnailUri: str
    is_transferable: bool = True
    shouldPreferSymbol: bool = False


class MintHashes(BaseModel):
    imageHash: str
    metadataHash: str


class MintResponse(BaseModel):
    status: bool
    msg: MintHashes | str
