"""
Admin API Routes - Maintenance Endpoints

Called by an external scheduler, authenticated with the admin API key
rather than a user access token.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.maintenance import (
    PurgeExpiredRecordsResponse,
    PurgeExpiredRecordsUseCase,
)
from src.depends import get_config, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/maintenance/purge-expired",
    status_code=status.HTTP_200_OK,
    response_model=PurgeExpiredRecordsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_expired(
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """
    Purge Expired Records

    Deletes expired sessions and reset tokens, and auth events older than
    AUDIT_RETENTION_DAYS.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Server error
    """
    result = await PurgeExpiredRecordsUseCase(uow).execute(config.AUDIT_RETENTION_DAYS)
    if result.is_err():
        raise ServerError(result.error)
    return result.value
