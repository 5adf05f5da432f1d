"""
Development-only endpoint echoing the resolved caller identity.

Mounted by create_app() only when USE_DEV_AUTHENTICATION is on.
"""

from fastapi import APIRouter, Depends

from app.auth import CurrentUser, get_current_user
from app.middleware.request_id import current_trace_id
from app.schemas.common import ApiResponse

router = APIRouter(prefix="/api", tags=["Auth"])


@router.get(
    "/auth-info",
    response_model=ApiResponse[CurrentUser],
    summary="Authentication debug info",
)
async def auth_info(user: CurrentUser = Depends(get_current_user)) -> ApiResponse[CurrentUser]:
    return ApiResponse[CurrentUser].ok(
        user, message=f"Authenticated as {user.id}", trace_id=current_trace_id()
    )
