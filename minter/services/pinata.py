import json
from pathlib import Path
from typing import Any, Protocol

import httpx
from loguru import logger

from minter.config import settings
from minter.models.pinning import PinataCredentials, PinOptions, PinResult


class PinningError(Exception):
    pass


class PinataAuthError(PinningError):
    pass


class PinningService(Protocol):
    async def authenticate(self) -> None: ...

    async def pin_file(self, path: Path, filename: str, options: PinOptions) -> PinResult: ...

    async def pin_json(self, content: dict[str, Any], options: PinOptions) -> PinResult: ...


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("details") or error.get("reason") or error)
        if error:
            return str(error)
    return json.dumps(body)


class PinataClient:
    def __init__(
        self,
        credentials: PinataCredentials,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.pinata_api_url,
            timeout=timeout if timeout is not None else settings.pinata_timeout_seconds,
            headers={
                "pinata_api_key": credentials.api_key,
                "pinata_secret_api_key": credentials.api_secret,
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def authenticate(self) -> None:
        try:
            response = await self._client.get("/data/testAuthentication")
        except httpx.HTTPError as exc:
            logger.exception("Pinata authentication request failed error={}", str(exc))
            raise PinataAuthError(f"Pinata unreachable: {exc}") from exc
        if response.is_error:
            detail = _error_detail(response)
            logger.warning("Pinata authentication rejected status={} detail={}", response.status_code, detail)
            raise PinataAuthError(detail)
        logger.debug("Pinata authentication ok")

    async def pin_file(self, path: Path, filename: str, options: PinOptions) -> PinResult:
        logger.info("Pinning file name={} filename={}", options.name, filename)
        with path.open("rb") as stream:
            files = {"file": (filename, stream)}
            data = {"pinataMetadata": json.dumps(options.as_pinata_metadata())}
            return await self._pin("/pinning/pinFileToIPFS", files=files, data=data)

    async def pin_json(self, content: dict[str, Any], options: PinOptions) -> PinResult:
        logger.info("Pinning JSON name={}", options.name)
        payload = {"pinataContent": content, "pinataMetadata": options.as_pinata_metadata()}
        return await self._pin("/pinning/pinJSONToIPFS", json=payload)

    async def _pin(self, url: str, **kwargs: Any) -> PinResult:
        try:
            response = await self._client.post(url, **kwargs)
        except httpx.HTTPError as exc:
            logger.exception("Pinata request failed url={} error={}", url, str(exc))
            raise PinningError(f"Pinata request failed: {exc}") from exc
        if response.is_error:
            detail = _error_detail(response)
            logger.warning("Pinata pin rejected url={} status={} detail={}", url, response.status_code, detail)
            raise PinningError(f"Pinata rejected pin ({response.status_code}): {detail}")

        result = PinResult.model_validate(response.json())
        logger.info("Pinata pin result url={} ipfs_hash={} pin_size={}", url, result.ipfs_hash, result.pin_size)
        return result
