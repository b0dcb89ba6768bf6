"""
===============================================================================
TARJETA CRC — identity_api/interfaces/api/http/routers/users.py
===============================================================================

Class/Module:
    Users Router

Responsibilities:
    - Exponer endpoints HTTP del ciclo de vida de registros de identidad.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir UserError -> RFC7807 (+ message).
    - Registrar auditoría de mutaciones exitosas (best-effort).

Collaborators:
    - application.usecases.users (Create/Get/List/Search/Update*/Delete)
    - identity.auth_users.require_caller (401 antes de cualquier use case)
    - audit.emit_audit_event
    - container (factories DI)
    - schemas.users (DTOs Pydantic)

Notas:
    - Orden de rutas: /users/search y /users/@{username} antes de
      /users/{user_id}.
    - La autorización NO se decide acá: la hace la policy dentro del use case.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from identity_api.application.usecases.users import (
    ChangeOwnPasswordUseCase,
    CreateUserInput,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserByUsernameUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    SearchUsersUseCase,
    UpdateUserPasswordUseCase,
    UpdateUserProfileInput,
    UpdateUserProfileUseCase,
    UpdateUserRoleUseCase,
    UserError,
    UserErrorCode,
)
from identity_api.audit import emit_audit_event
from identity_api.container import (
    get_audit_repository,
    get_change_own_password_use_case,
    get_create_user_use_case,
    get_delete_user_use_case,
    get_get_user_by_username_use_case,
    get_get_user_use_case,
    get_list_users_use_case,
    get_search_users_use_case,
    get_update_user_password_use_case,
    get_update_user_profile_use_case,
    get_update_user_role_use_case,
)
from identity_api.crosscutting.error_responses import (
    conflict,
    forbidden,
    internal_error,
    invalid_credential,
    not_found,
)
from identity_api.domain.entities import CallerContext
from identity_api.domain.repositories import AuditEventRepository
from identity_api.domain.user_search import SearchFilter
from identity_api.identity.auth_users import require_caller

from ..schemas.users import (
    ChangeOwnPasswordReq,
    CreateUserReq,
    DataRes,
    PublicUserRes,
    UpdateOwnProfileReq,
    UpdatePasswordReq,
    UpdateRoleReq,
    UpdateUserReq,
    UserRes,
)

router = APIRouter(tags=["users"])


# =============================================================================
# Helpers internos
# =============================================================================


def _raise_user_error(error: UserError) -> None:
    """Traduce UserError (application layer) a RFC7807."""
    if error.code == UserErrorCode.FORBIDDEN:
        raise forbidden(error.message)

    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found(error.message)

    if error.code == UserErrorCode.CONFLICT:
        raise conflict(error.message)

    if error.code == UserErrorCode.INVALID_CREDENTIAL:
        raise invalid_credential(error.message)

    # Fallback (no debería ocurrir)
    raise internal_error(error.message)


def _unwrap(result):
    """Devuelve result.user o traduce el error."""
    if result.error is not None:
        _raise_user_error(result.error)
    if result.user is None:
        raise internal_error("Empty use case result")
    return result.user


# =============================================================================
# Lecturas
# =============================================================================


@router.get("/users", response_model=list[UserRes])
def list_users(
    caller: CallerContext = Depends(require_caller()),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
):
    result = use_case.execute(caller)
    if result.error is not None:
        _raise_user_error(result.error)
    return [UserRes.from_view(view) for view in result.users]


@router.get("/users/search", response_model=list[UserRes])
def search_users(
    request: Request,
    caller: CallerContext = Depends(require_caller()),
    use_case: SearchUsersUseCase = Depends(get_search_users_use_case),
):
    # Se leen los query params crudos: "ausente" y "vacío" se distinguen acá
    # y la política de cero resultados la decide el use case.
    filters = SearchFilter.from_params(dict(request.query_params))
    result = use_case.execute(caller, filters)
    if result.error is not None:
        _raise_user_error(result.error)
    return [UserRes.from_view(view) for view in result.users]


@router.get("/users/@{username}", response_model=PublicUserRes)
def get_user_by_username(
    username: str,
    caller: CallerContext = Depends(require_caller()),
    use_case: GetUserByUsernameUseCase = Depends(get_get_user_by_username_use_case),
):
    return PublicUserRes.from_view(_unwrap(use_case.execute(caller, username)))


@router.get("/users/{user_id}", response_model=UserRes)
def get_user(
    user_id: UUID,
    caller: CallerContext = Depends(require_caller()),
    use_case: GetUserUseCase = Depends(get_get_user_use_case),
):
    return UserRes.from_view(_unwrap(use_case.execute(caller, user_id)))


# =============================================================================
# Create
# =============================================================================


@router.post("/users", response_model=UserRes, status_code=201)
def create_user(
    req: CreateUserReq,
    caller: CallerContext = Depends(require_caller()),
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = use_case.execute(
        CreateUserInput(
            caller=caller,
            email=req.email,
            username=req.username,
            password=req.password,
            full_name=req.full_name,
            role=req.role,
        )
    )
    view = _unwrap(result)

    emit_audit_event(
        audit_repo,
        action="users.create",
        caller=caller,
        target_id=view.id,
        metadata={"role": view.role.value},
    )
    return UserRes.from_view(view)


# =============================================================================
# Self-service (antes de /users/{user_id})
# =============================================================================


@router.put("/users/update/me", response_model=UserRes)
def update_own_profile(
    req: UpdateOwnProfileReq,
    caller: CallerContext = Depends(require_caller()),
    use_case: UpdateUserProfileUseCase = Depends(get_update_user_profile_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = use_case.execute_own(
        UpdateUserProfileInput(
            caller=caller, username=req.username, full_name=req.full_name
        )
    )
    view = _unwrap(result)

    emit_audit_event(
        audit_repo,
        action="users.update_own_profile",
        caller=caller,
        target_id=view.id,
        metadata={"fields": sorted(req.model_fields_set)},
    )
    return UserRes.from_view(view)


@router.put("/users/my/password", response_model=DataRes)
def change_own_password(
    req: ChangeOwnPasswordReq,
    caller: CallerContext = Depends(require_caller()),
    use_case: ChangeOwnPasswordUseCase = Depends(get_change_own_password_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = use_case.execute(caller, req.current_password, req.password)
    if result.error is not None:
        _raise_user_error(result.error)

    emit_audit_event(
        audit_repo,
        action="users.update_own_password",
        caller=caller,
        target_id=caller.caller_id,
    )
    return DataRes(data=result.updated)


# =============================================================================
# Mutaciones administrativas por id
# =============================================================================


@router.put("/users/password/{user_id}", response_model=DataRes)
def update_user_password(
    user_id: UUID,
    req: UpdatePasswordReq,
    caller: CallerContext = Depends(require_caller()),
    use_case: UpdateUserPasswordUseCase = Depends(get_update_user_password_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = use_case.execute(caller, user_id, req.password)
    if result.error is not None:
        _raise_user_error(result.error)

    emit_audit_event(
        audit_repo,
        action="users.update_password",
        caller=caller,
        target_id=user_id,
    )
    return DataRes(data=result.updated)


@router.put("/users/role/{user_id}", response_model=UserRes)
def update_user_role(
    user_id: UUID,
    req: UpdateRoleReq,
    caller: CallerContext = Depends(require_caller()),
    use_case: UpdateUserRoleUseCase = Depends(get_update_user_role_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    view = _unwrap(use_case.execute(caller, user_id, req.role))

    emit_audit_event(
        audit_repo,
        action="users.update_role",
        caller=caller,
        target_id=user_id,
        metadata={"role": view.role.value},
    )
    return UserRes.from_view(view)


@router.put("/users/{user_id}", response_model=UserRes)
def update_user(
    user_id: UUID,
    req: UpdateUserReq,
    caller: CallerContext = Depends(require_caller()),
    use_case: UpdateUserProfileUseCase = Depends(get_update_user_profile_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = use_case.execute(
        UpdateUserProfileInput(
            caller=caller,
            user_id=user_id,
            email=req.email,
            username=req.username,
            full_name=req.full_name,
        )
    )
    view = _unwrap(result)

    emit_audit_event(
        audit_repo,
        action="users.update",
        caller=caller,
        target_id=user_id,
        metadata={"fields": sorted(req.model_fields_set)},
    )
    return UserRes.from_view(view)


@router.delete("/users/{user_id}", response_model=UserRes)
def delete_user(
    user_id: UUID,
    caller: CallerContext = Depends(require_caller()),
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    view = _unwrap(use_case.execute(caller, user_id))

    emit_audit_event(
        audit_repo,
        action="users.delete",
        caller=caller,
        target_id=user_id,
    )
    return UserRes.from_view(view)
