"""Share API routes: one catch-all path per verb."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from common import entry_codec
from common.constants import (
    ENTRY_MARKER_DIRECTORY,
    ENTRY_MARKER_FILE,
    HEADER_TYPE,
)
from host.access_control import RequestContext
from host.responses import UTF8JSONResponse
from host.services.share_service import DirectoryListing, ShareService

router = APIRouter(tags=["Share"])


def get_share_service(request: Request) -> ShareService:
    return request.app.state.share_service


def get_request_context(request: Request) -> RequestContext:
    return request.state.context


@router.get("/{requested_path:path}")
async def read_entry(
    requested_path: str,
    info: Optional[str] = Query(None, description="'1' returns metadata only"),
    service: ShareService = Depends(get_share_service),
    context: RequestContext = Depends(get_request_context),
):
    """
    List a directory, download a file, or return metadata.

    Parameters:
        - requested_path: Path below the shared root
        - info: When '1', return the entry metadata without reading content

    Returns:
        - Directory: JSON array of entries (directories first), 204 if empty
        - File: raw content, 204 if empty
        - info=1: a single JSON entry

    Raises:
        - 400: Path outside the shared root
        - 404: Entry not found
    """
    if (info or "").strip().lower() == "1":
        entry = await service.info(requested_path, context)
        return UTF8JSONResponse(entry_codec.to_wire(entry))

    result = await service.read(requested_path, context)

    if isinstance(result, DirectoryListing):
        headers = {HEADER_TYPE: ENTRY_MARKER_DIRECTORY}
        if result.is_empty:
            return Response(status_code=204, headers=headers)
        return UTF8JSONResponse([entry_codec.to_wire(e) for e in result.entries], headers=headers)

    headers = {HEADER_TYPE: ENTRY_MARKER_FILE}
    if result.is_empty:
        return Response(status_code=204, headers=headers)
    return Response(content=result.data, media_type=result.content_type, headers=headers)


@router.post("/{requested_path:path}")
async def create_directory(
    requested_path: str,
    service: ShareService = Depends(get_share_service),
    context: RequestContext = Depends(get_request_context),
):
    """
    Create a directory, including intermediate directories.

    Raises:
        - 400: Path outside the shared root, or the root itself
        - 403: Host is read-only
        - 409: Entry already exists
    """
    entry = await service.create_directory(requested_path, context)
    return UTF8JSONResponse(entry_codec.to_wire(entry))


@router.put("/{requested_path:path}")
async def write_file(
    requested_path: str,
    request: Request,
    service: ShareService = Depends(get_share_service),
    context: RequestContext = Depends(get_request_context),
):
    """
    Write the request body as the full content of a file.

    Raises:
        - 400: Path outside the shared root, or the root itself
        - 403: Host is read-only
        - 409: A directory occupies the path
    """
    data = await request.body()
    entry = await service.write_file(requested_path, data, context)
    return UTF8JSONResponse(entry_codec.to_wire(entry))


@router.delete("/{requested_path:path}")
async def delete_entry(
    requested_path: str,
    service: ShareService = Depends(get_share_service),
    context: RequestContext = Depends(get_request_context),
):
    """
    Delete a file, or a directory recursively.

    Returns:
        - The entry as it was before deletion

    Raises:
        - 400: Path outside the shared root, or the root itself
        - 403: Host is read-only
        - 404: Entry not found
    """
    entry = await service.delete(requested_path, context)
    return UTF8JSONResponse(entry_codec.to_wire(entry))
