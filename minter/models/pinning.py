from pydantic import BaseModel, ConfigDict, Field


class PinataCredentials(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1)


class PinOptions(BaseModel):
    name: str
    keyvalues: dict[str, str] = Field(default_factory=dict)

    def as_pinata_metadata(self) -> dict[str, object]:
        metadata: dict[str, object] = {"name": self.name}
        if self.keyvalues:
            metadata["keyvalues"] = self.keyvalues
        return metadata


class PinResult(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ipfs_hash: str = Field(default="", alias="IpfsHash")
    pin_size: int = Field(default=0, alias="PinSize")
    timestamp: str | None = Field(default=None, alias="Timestamp")

    @property
    def is_pinned(self) -> bool:
        # Pinata reports success with a content hash and a positive size.
        return bool(self.ipfs_hash) and self.pin_size > 0
