from loguru import logger

from minter.config import settings
from minter.models.mint import MintHashes, MintRequest, NftMetadata
from minter.models.pinning import PinOptions, PinResult
from minter.models.upload import UploadedAsset
from minter.services.pinata import PinataAuthError, PinningError, PinningService
from minter.services.storage import delete_upload, staged_path

NO_FILE = "no file provided"
FILE_NOT_PINNED = "file was not pinned"
METADATA_NOT_PINNED = "metadata were not pinned"


class MintFailed(Exception):
    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def ipfs_uri(ipfs_hash: str) -> str:
    return f"ipfs://{ipfs_hash}"


def build_metadata(request: MintRequest, image_pin: PinResult) -> NftMetadata:
    image_uri = ipfs_uri(image_pin.ipfs_hash)
    return NftMetadata(
        name=request.title,
        description=request.description,
        symbol=settings.nft_symbol,
        artifactUri=image_uri,
        displayUri=image_uri,
        creators=[request.creator],
        decimals=0,
        thumbnailUri=settings.nft_thumbnail_uri,
        is_transferable=True,
        shouldPreferSymbol=False,
    )


async def handle_mint(
    request: MintRequest,
    asset: UploadedAsset | None,
    pinning: PinningService,
) -> MintHashes:
    """Pin an uploaded image and its NFT metadata document.

    Each step runs once and in order; the first failing step raises
    ``MintFailed`` and nothing after it is attempted.
    """
    if asset is None:
        raise MintFailed(NO_FILE, status_code=400)

    logger.info(
        "Mint started title={} creator={} storage_key={} size_bytes={}",
        request.title,
        request.creator,
        asset.storage_key,
        asset.size_bytes,
    )

    try:
        await pinning.authenticate()
    except PinataAuthError as exc:
        logger.warning("Mint aborted; pinning authentication failed error={}", str(exc))
        raise MintFailed(str(exc)) from exc

    image_options = PinOptions(name=request.pin_name, keyvalues={"description": request.description})
    try:
        image_pin = await pinning.pin_file(staged_path(asset), asset.filename, image_options)
    except PinningError as exc:
        logger.warning("Image pin failed storage_key={} error={}", asset.storage_key, str(exc))
        raise MintFailed(FILE_NOT_PINNED) from exc
    if not image_pin.is_pinned:
        logger.warning(
            "Image not pinned storage_key={} ipfs_hash={} pin_size={}",
            asset.storage_key,
            image_pin.ipfs_hash,
            image_pin.pin_size,
        )
        raise MintFailed(FILE_NOT_PINNED)

    delete_upload(asset)

    metadata = build_metadata(request, image_pin)
    try:
        metadata_pin = await pinning.pin_json(
            metadata.model_dump(),
            PinOptions(name=settings.metadata_pin_name),
        )
    except PinningError as exc:
        logger.warning("Metadata pin failed image_hash={} error={}", image_pin.ipfs_hash, str(exc))
        raise MintFailed(METADATA_NOT_PINNED) from exc
    if not metadata_pin.is_pinned:
        logger.warning(
            "Metadata not pinned image_hash={} ipfs_hash={} pin_size={}",
            image_pin.ipfs_hash,
            metadata_pin.ipfs_hash,
            metadata_pin.pin_size,
        )
        raise MintFailed(METADATA_NOT_PINNED)

    logger.info(
        "Mint finished image_hash={} metadata_hash={}",
        image_pin.ipfs_hash,
        metadata_pin.ipfs_hash,
    )
    return MintHashes(imageHash=image_pin.ipfs_hash, metadataHash=metadata_pin.ipfs_hash)
