from fastapi import APIRouter, Depends, Query

from fabtrack.core.state import get_user_directory
from fabtrack.schemas.clients.client_schemas import ClientListData
from fabtrack.services.directory.user_directory import UserDirectory
from fabtrack.utils.check_roles import require_role
from fabtrack.utils.response import APIResponse, ERROR_RESPONSES, success_response

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    responses=ERROR_RESPONSES,
)


@router.get("", response_model=APIResponse[ClientListData])
async def list_clients_api(
    refresh: bool = Query(False),
    directory: UserDirectory = Depends(get_user_directory),
    admin=Depends(require_role(["admin"])),
):
    clients = await directory.list_clients(refresh=refresh)
    return success_response(
        "Clients retrieved successfully",
        ClientListData(total=len(clients), items=clients),
    )
