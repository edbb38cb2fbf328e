from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from minter.models.mint import MintRequest, MintResponse
from minter.models.upload import UploadedAsset
from minter.services.minting import MintFailed, handle_mint
from minter.services.pinata import PinningService
from minter.services.storage import UploadTooLarge, delete_upload, save_upload

router = APIRouter(tags=["mint"])


def get_pinning_service(request: Request) -> PinningService:
    return request.app.state.pinning


def _failure(status_code: int, msg: str) -> JSONResponse:
    body = MintResponse(status=False, msg=msg)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post("/mint", response_model=MintResponse)
async def mint(
    image: UploadFile | None = File(None),
    title: str | None = Form(None),
    description: str = Form(""),
    creator: str = Form(""),
    pinning: PinningService = Depends(get_pinning_service),
):
    if image is None:
        logger.warning("Mint rejected; no file provided")
        return _failure(400, "no file provided")
    if not title or not title.strip():
        logger.warning("Mint rejected; no title provided filename={}", image.filename)
        return _failure(400, "no title provided")

    request = MintRequest(title=title, description=description, creator=creator)
    asset: UploadedAsset | None = None
    try:
        asset = await save_upload(image)
        hashes = await handle_mint(request, asset, pinning)
    except UploadTooLarge as exc:
        logger.warning("Mint rejected; upload too large filename={} error={}", image.filename, str(exc))
        return _failure(413, "file too large")
    except MintFailed as exc:
        return _failure(exc.status_code, exc.message)
    except Exception as exc:
        logger.exception("Mint failed unexpectedly title={} error={}", request.title, str(exc))
        return _failure(500, "internal server error")
    finally:
        if asset is not None:
            delete_upload(asset)

    return MintResponse(status=True, msg=hashes)
