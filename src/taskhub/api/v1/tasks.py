"""Task endpoints - organization-scoped CRUD with soft delete.

Routes addressing a task by id resolve the organization from the stored task;
an ``organization_id`` sent by the client on those routes is never trusted.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.taskhub.api.dependencies import AuditServiceDep, TaskServiceDep, authorized
from src.taskhub.core.authz import (
    TASK_UPDATE_POLICY,
    FieldPolicyViolation,
    Minimum,
    RoutePolicy,
    from_body,
    from_query,
    from_resource,
)
from src.taskhub.models import AuditAction, AuditOutcome, OrganizationRole
from src.taskhub.schemas.task import TaskCreate, TaskRead, TaskUpdate
from src.taskhub.services.task_service import InvalidAssigneeError, TaskNotFoundError

router = APIRouter(prefix="/tasks", tags=["tasks"])

TASK_RESOURCE = from_resource("task", "task_id")

CREATE_TASK = RoutePolicy(
    requirement=Minimum(OrganizationRole.ADMIN),
    source=from_body("organization_id"),
    audit_action=AuditAction.TASK_CREATE,
    resource_type="task",
)
LIST_TASKS = RoutePolicy(
    requirement=Minimum(OrganizationRole.VIEWER),
    source=from_query("organization_id"),
)
LIST_DELETED_TASKS = RoutePolicy(
    requirement=Minimum(OrganizationRole.ADMIN),
    source=from_query("organization_id"),
)
VIEW_TASK = RoutePolicy(requirement=Minimum(OrganizationRole.VIEWER), source=TASK_RESOURCE)
UPDATE_TASK = RoutePolicy(
    requirement=Minimum(OrganizationRole.VIEWER),
    source=TASK_RESOURCE,
    audit_action=AuditAction.TASK_UPDATE,
    resource_type="task",
)
DELETE_TASK = RoutePolicy(
    requirement=Minimum(OrganizationRole.ADMIN),
    source=TASK_RESOURCE,
    audit_action=AuditAction.TASK_DELETE,
    resource_type="task",
)
RESTORE_TASK = RoutePolicy(
    requirement=Minimum(OrganizationRole.ADMIN),
    source=TASK_RESOURCE,
    audit_action=AuditAction.TASK_RESTORE,
    resource_type="task",
)

TaskCreator = authorized(CREATE_TASK)
TaskListViewer = authorized(LIST_TASKS)
DeletedTaskViewer = authorized(LIST_DELETED_TASKS)
TaskViewer = authorized(VIEW_TASK)
TaskEditor = authorized(UPDATE_TASK)
TaskDeleter = authorized(DELETE_TASK)
TaskRestorer = authorized(RESTORE_TASK)

OrganizationQuery = Annotated[UUID, Query(description="Organization to list tasks for")]


def _not_found(e: TaskNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    description="ADMIN or above in the organization named by organization_id.",
    responses={
        400: {"description": "Assignee is not a member of the organization"},
        403: {"description": "Insufficient permissions for this organization"},
    },
)
async def create_task(
    request: TaskCreate,
    context: TaskCreator,
    task_service: TaskServiceDep,
    audit_service: AuditServiceDep,
) -> TaskRead:
    try:
        task = await task_service.create(request, context.organization_id, context.caller_id)
    except InvalidAssigneeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    await audit_service.record(
        AuditAction.TASK_CREATE,
        "task",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=task.id,
        details={"title": task.title},
    )
    return TaskRead.model_validate(task)


@router.get(
    "",
    response_model=list[TaskRead],
    summary="List tasks",
    description="Active tasks of an organization, newest first.",
)
async def list_tasks(
    organization_id: OrganizationQuery,
    context: TaskListViewer,
    task_service: TaskServiceDep,
) -> list[TaskRead]:
    tasks = await task_service.list_active(context.organization_id)
    return [TaskRead.model_validate(task) for task in tasks]


@router.get(
    "/deleted",
    response_model=list[TaskRead],
    summary="List deleted tasks",
    description="Soft-deleted tasks of an organization. ADMIN or above.",
)
async def list_deleted_tasks(
    organization_id: OrganizationQuery,
    context: DeletedTaskViewer,
    task_service: TaskServiceDep,
) -> list[TaskRead]:
    tasks = await task_service.list_deleted(context.organization_id)
    return [TaskRead.model_validate(task) for task in tasks]


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    summary="Get task",
    responses={404: {"description": "Task not found"}},
)
async def get_task(
    task_id: UUID,
    context: TaskViewer,
    task_service: TaskServiceDep,
) -> TaskRead:
    try:
        task = await task_service.get(task_id, context.organization_id)
    except TaskNotFoundError as e:
        raise _not_found(e) from e
    return TaskRead.model_validate(task)


@router.put(
    "/{task_id}",
    response_model=TaskRead,
    summary="Update task",
    description=(
        "Partial update. VIEWERs may only change status. The owning organization "
        "always comes from the stored task."
    ),
    responses={
        400: {"description": "Assignee is not a member of the organization"},
        403: {"description": "Insufficient role, or a field the role may not change"},
        404: {"description": "Task not found"},
    },
)
async def update_task(
    task_id: UUID,
    request: TaskUpdate,
    context: TaskEditor,
    task_service: TaskServiceDep,
    audit_service: AuditServiceDep,
) -> TaskRead:
    changes = request.model_dump(exclude_unset=True)

    try:
        TASK_UPDATE_POLICY.enforce(context.caller_role, changes)
    except FieldPolicyViolation as e:
        await audit_service.record(
            AuditAction.TASK_UPDATE,
            "task",
            actor_id=context.caller_id,
            organization_id=context.organization_id,
            resource_id=task_id,
            outcome=AuditOutcome.DENIED,
            details={"error": type(e).__name__, "fields": sorted(e.fields)},
        )
        raise

    try:
        task = await task_service.update(task_id, context.organization_id, changes)
    except TaskNotFoundError as e:
        raise _not_found(e) from e
    except InvalidAssigneeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    await audit_service.record(
        AuditAction.TASK_UPDATE,
        "task",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=task.id,
        details={"fields": sorted(changes)},
    )
    return TaskRead.model_validate(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete task",
    description="Soft delete. ADMIN or above.",
    responses={404: {"description": "Task not found or already deleted"}},
)
async def delete_task(
    task_id: UUID,
    context: TaskDeleter,
    task_service: TaskServiceDep,
    audit_service: AuditServiceDep,
) -> None:
    try:
        await task_service.soft_delete(task_id, context.organization_id)
    except TaskNotFoundError as e:
        raise _not_found(e) from e

    await audit_service.record(
        AuditAction.TASK_DELETE,
        "task",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=task_id,
    )


@router.patch(
    "/{task_id}/restore",
    response_model=TaskRead,
    summary="Restore task",
    description="Undo a soft delete. ADMIN or above.",
    responses={404: {"description": "Task not found or not deleted"}},
)
async def restore_task(
    task_id: UUID,
    context: TaskRestorer,
    task_service: TaskServiceDep,
    audit_service: AuditServiceDep,
) -> TaskRead:
    try:
        task = await task_service.restore(task_id, context.organization_id)
    except TaskNotFoundError as e:
        raise _not_found(e) from e

    await audit_service.record(
        AuditAction.TASK_RESTORE,
        "task",
        actor_id=context.caller_id,
        organization_id=context.organization_id,
        resource_id=task_id,
    )
    return TaskRead.model_validate(task)
