"""Redirect route for short links."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

from linkreg.errors import LinkNotFound, StorageFailure

router = APIRouter()


@router.get("/{code}", include_in_schema=False)
async def redirect_to_target(request: Request, code: str):
    """Redirect to the target URL, recording the hit."""
    registry = request.app.state.registry

    try:
        target_url = await registry.resolve(code)
    except LinkNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Storage error: {str(e)}",
        )

    # Temporary redirect so clients don't cache it and every hit is counted
    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
