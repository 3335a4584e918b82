"""
Shared utilities for the request handlers.
"""

from fastapi import HTTPException, Request, status


def is_json_request(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


async def read_limited_body(request: Request, max_bytes: int) -> bytes:
    """
    Read the request body, failing with 400 once it grows past `max_bytes`.

    The declared Content-Length is checked first so oversized uploads are
    refused without being read.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Request body too large (limit {max_bytes} bytes)",
        )

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Request body too large (limit {max_bytes} bytes)",
            )
    return bytes(body)
