from fastapi import APIRouter, Depends, status

from snackhub.dependencies.dbDependecies import db_dependency
from snackhub.modules.access.permissions import ROLE_MANAGEMENT_ROLES
from snackhub.modules.auth.dependencies import require_role
from snackhub.modules.auth.utils import get_current_user
from snackhub.modules.roles.service import RoleService
from snackhub.modules.roles.schemas import RoleCreate, RoleUpdate, RoleOut, RoleList

role_router = APIRouter(tags=["Roles"])


@role_router.get("/loadRoles", response_model=RoleList, dependencies=[Depends(get_current_user)])
def load_roles(db: db_dependency):
    return RoleService(db).get_all_roles()


@role_router.post(
    "/storeRole",
    response_model=RoleOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role(ROLE_MANAGEMENT_ROLES))]
)
def store_role(role: RoleCreate, db: db_dependency):
    return RoleService(db).create_role(role)


@role_router.put(
    "/updateRole/{role_id}",
    response_model=RoleOut,
    dependencies=[Depends(require_role(ROLE_MANAGEMENT_ROLES))]
)
def update_role(role_id: int, update: RoleUpdate, db: db_dependency):
    return RoleService(db).update_role(role_id, update)


@role_router.delete("/deleteRole/{role_id}", dependencies=[Depends(require_role(ROLE_MANAGEMENT_ROLES))])
def delete_role(role_id: int, db: db_dependency):
    return RoleService(db).delete_role(role_id)
