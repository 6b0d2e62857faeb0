from fastapi import APIRouter, Depends

from gradebook.api.deps import get_actor, get_user_admin_service
from gradebook.schemas.user import AdminUserOut, ApproveResponse, MessageResponse, UserOut
from gradebook.services.policy import Actor
from gradebook.services.users import UserAdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[AdminUserOut])
def list_users(
    actor: Actor = Depends(get_actor),
    users: UserAdminService = Depends(get_user_admin_service),
):
    return [AdminUserOut.from_user(u) for u in users.list_users(actor)]


@router.put("/approve/{user_id}", response_model=ApproveResponse)
def approve_teacher(
    user_id: int,
    actor: Actor = Depends(get_actor),
    users: UserAdminService = Depends(get_user_admin_service),
):
    user = users.approve_teacher(actor, user_id)
    return ApproveResponse(message="Teacher account approved successfully", user=UserOut.model_validate(user))


@router.delete("/user/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    actor: Actor = Depends(get_actor),
    users: UserAdminService = Depends(get_user_admin_service),
):
    users.delete_user(actor, user_id)
    return MessageResponse(message="User deleted successfully")
