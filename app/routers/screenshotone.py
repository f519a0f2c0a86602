import logging
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings
from app.models.execute import ExecuteRequest, ExecuteResponse, OperationInfo
from app.models.parameters import OPTIONS_BY_OPERATION
from app.services.dispatcher import AuthenticatedHttpClient, ScreenshotOneClient
from app.services.errors import NodeApiError, NodeOperationError
from app.services.executor import execute_items

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/screenshotone", tags=["ScreenshotOne"])

_DISPLAY_NAMES = {
    "screenshot": "Screenshot",
    "full_page": "Full Page Screenshot",
    "pdf": "PDF",
    "scrolling_screenshot": "Scrolling Screenshot",
    "short_video": "Record Short Video",
}


async def get_client() -> AsyncIterator[AuthenticatedHttpClient]:
    """Yield a ScreenshotOne client for the duration of one batch."""
    if not settings.SCREENSHOTONE_ACCESS_KEY:
        raise HTTPException(status_code=503, detail="ScreenshotOne credentials are not configured.")

    async with ScreenshotOneClient(settings.SCREENSHOTONE_ACCESS_KEY) as client:
        yield client


@router.post(
    "/execute",
    response_model=ExecuteResponse,
    summary="Render screenshots, PDFs and videos with ScreenshotOne",
    description=(
        "Runs every item through the ScreenshotOne API in order and returns one "
        "output item per input item, paired by index.\n\n"
        "With `continue_on_fail` set, failing items carry `{\"error\": ...}` "
        "instead of aborting the whole batch."
    ),
)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def execute(
    request: Request,
    body: ExecuteRequest,
    client: AuthenticatedHttpClient = Depends(get_client),
) -> ExecuteResponse:
    logger.info(
        "Execute request received",
        extra={"items": len(body.items), "continue_on_fail": body.continue_on_fail},
    )

    try:
        results = await execute_items(body.items, client, continue_on_fail=body.continue_on_fail)
    except NodeOperationError as exc:
        logger.error("Invalid parameters for item %s: %s", exc.item_index, exc.message)
        raise HTTPException(status_code=400, detail=exc.to_detail())
    except NodeApiError as exc:
        logger.error("ScreenshotOne request failed for item %s: %s", exc.item_index, exc.message)
        status_code = exc.status_code if exc.status_code and 400 <= exc.status_code < 500 else 502
        raise HTTPException(status_code=status_code, detail=exc.to_detail())

    return ExecuteResponse(items=results)


@router.get(
    "/operations",
    response_model=List[OperationInfo],
    summary="List the supported operations",
)
async def list_operations() -> List[OperationInfo]:
    return [
        OperationInfo(
            name=name,
            display_name=_DISPLAY_NAMES[name],
            endpoint="animate" if name == "short_video" else "take",
            options=list(options_model.model_fields),
        )
        for name, options_model in OPTIONS_BY_OPERATION.items()
    ]
