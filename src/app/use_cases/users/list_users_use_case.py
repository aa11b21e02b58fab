"""
List Users Use Case
"""

import math
from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserInfo
from .dtos import Pagination, UserListResponse

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def normalize_page(page: int, limit: int):
    """Out-of-range values fall back to page 1 / 20 per page."""
    if page < 1:
        page = 1
    if limit < 1 or limit > MAX_PAGE_SIZE:
        limit = DEFAULT_PAGE_SIZE
    return page, limit


class ListUsersUseCase:
    """
    Use case for listing the users of a tenant.

    Business Rules:
    - page < 1 becomes 1, limit outside 1..100 becomes 20
    - Each user is returned with the role held in this tenant
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Result[UserListResponse]:
        page, limit = normalize_page(page, limit)

        async with self.uow:
            users, total = await self.uow.users.list_by_tenant(
                tenant_id, offset=(page - 1) * limit, limit=limit
            )

            return Return.ok(
                UserListResponse(
                    data=[UserInfo.of(u, u.role_for_tenant(tenant_id), tenant_id) for u in users],
                    pagination=Pagination(
                        page=page,
                        limit=limit,
                        total=total,
                        total_pages=math.ceil(total / limit) if total else 0,
                    ),
                )
            )
