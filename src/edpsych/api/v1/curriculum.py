"""
Curriculum Collaboration API Endpoints

Curriculum plans and the collaboration around them. Access is decided per
plan:
- owner (and admins): everything, including managing collaborators
- editor collaborators: edit the plan, comments and tasks
- viewer collaborators: read only
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import (
    CurriculumPlan,
    CurriculumPlanCollaborator,
    CurriculumPlanComment,
    CurriculumPlanTask,
    User,
)
from edpsych.core.pagination import Page, PageParams, page_params, paginate
from edpsych.core.schemas import (
    CollaborationView,
    CollaboratorAdd,
    CollaboratorAddResponse,
    CommentCreate,
    CommentSchema,
    CurriculumPlanCreate,
    CurriculumPlanSchema,
    CurriculumPlanUpdate,
    TaskCreate,
    TaskSchema,
    TaskUpdate,
)
from edpsych.core.security import get_current_user

router = APIRouter()

EDIT_ROLES = ("owner", "admin", "editor")
MANAGE_ROLES = ("owner", "admin")


async def _plan_with_role(
    db: AsyncSession, plan_id: UUID, user: User, allowed: tuple[str, ...] | None = None
) -> tuple[CurriculumPlan, str]:
    """Load a plan and the caller's role on it.

    Raises 404 for a missing plan, 403 when the caller has no role on it or
    their role is not in `allowed`.
    """
    result = await db.execute(
        select(CurriculumPlan).where(
            CurriculumPlan.id == plan_id, CurriculumPlan.deleted_at.is_(None)
        )
    )
    plan = result.scalar_one_or_none()

    if not plan:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Curriculum plan not found with ID: {plan_id}",
        )

    if plan.user_id == user.id:
        role = "owner"
    elif user.is_admin:
        role = "admin"
    else:
        collaborator = await _get_collaborator(db, plan_id, user.id)
        if collaborator is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have access to this curriculum plan",
            )
        role = collaborator.role

    if allowed is not None and role not in allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"The {role} role cannot perform this action",
        )

    return plan, role


async def _get_collaborator(
    db: AsyncSession, plan_id: UUID, user_id: UUID
) -> CurriculumPlanCollaborator | None:
    result = await db.execute(
        select(CurriculumPlanCollaborator).where(
            CurriculumPlanCollaborator.plan_id == plan_id,
            CurriculumPlanCollaborator.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def _get_user_or_404(db: AsyncSession, *, user_id: UUID | None, email: str | None) -> User:
    stmt = select(User).where(User.deleted_at.is_(None))
    stmt = stmt.where(User.id == user_id) if user_id else stmt.where(User.email == email)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {user_id or email}",
        )

    return user


# ----------------------------------------------------------------------
# Plans
# ----------------------------------------------------------------------


@router.post("/plans", response_model=CurriculumPlanSchema, status_code=status.HTTP_201_CREATED)
async def create_plan(
    plan_data: CurriculumPlanCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurriculumPlan:
    plan = CurriculumPlan(**plan_data.model_dump(), user_id=current_user.id)

    db.add(plan)
    await db.commit()
    await db.refresh(plan)

    return plan


@router.get("/plans", response_model=Page[CurriculumPlanSchema])
async def list_plans(
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List plans the caller owns or collaborates on, most recently updated first."""
    shared = select(CurriculumPlanCollaborator.plan_id).where(
        CurriculumPlanCollaborator.user_id == current_user.id
    )
    stmt = (
        select(CurriculumPlan)
        .where(
            CurriculumPlan.deleted_at.is_(None),
            or_(CurriculumPlan.user_id == current_user.id, CurriculumPlan.id.in_(shared)),
        )
        .order_by(CurriculumPlan.updated_at.desc())
    )
    return await paginate(db, stmt, params)


@router.get("/plans/{plan_id}", response_model=CurriculumPlanSchema)
async def get_plan(
    plan_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurriculumPlan:
    plan, _role = await _plan_with_role(db, plan_id, current_user)
    return plan


@router.put("/plans/{plan_id}", response_model=CurriculumPlanSchema)
async def update_plan(
    plan_id: UUID,
    plan_update: CurriculumPlanUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurriculumPlan:
    """Update a plan (owner, editor or admin)."""
    plan, _role = await _plan_with_role(db, plan_id, current_user, EDIT_ROLES)

    update_data = plan_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(plan, field, value)

    await db.commit()
    await db.refresh(plan)

    return plan


@router.delete("/plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plan(
    plan_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Soft delete a plan (owner or admin)."""
    plan, _role = await _plan_with_role(db, plan_id, current_user, MANAGE_ROLES)

    plan.soft_delete()
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/plans/{plan_id}/collaboration", response_model=CollaborationView)
async def get_collaboration(
    plan_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Plan with its collaborators, comments, tasks and the caller's role."""
    plan, role = await _plan_with_role(db, plan_id, current_user)

    collaborators = await db.execute(
        select(CurriculumPlanCollaborator)
        .where(CurriculumPlanCollaborator.plan_id == plan_id)
        .order_by(CurriculumPlanCollaborator.created_at)
    )
    comments = await db.execute(
        select(CurriculumPlanComment)
        .where(CurriculumPlanComment.plan_id == plan_id)
        .order_by(CurriculumPlanComment.created_at.desc())
    )
    tasks = await db.execute(
        select(CurriculumPlanTask)
        .where(CurriculumPlanTask.plan_id == plan_id)
        .order_by(CurriculumPlanTask.created_at.desc())
    )

    return {
        "plan": plan,
        "collaborators": list(collaborators.scalars().all()),
        "comments": list(comments.scalars().all()),
        "tasks": list(tasks.scalars().all()),
        "user_role": role,
    }


# ----------------------------------------------------------------------
# Collaborators
# ----------------------------------------------------------------------


@router.post(
    "/plans/{plan_id}/collaborators",
    response_model=CollaboratorAddResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_collaborator(
    plan_id: UUID,
    collaborator_data: CollaboratorAdd,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Add a collaborator, or change the role of an existing one."""
    plan, _role = await _plan_with_role(db, plan_id, current_user, MANAGE_ROLES)
    user = await _get_user_or_404(
        db, user_id=collaborator_data.user_id, email=collaborator_data.email
    )

    if user.id == plan.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The plan owner cannot be added as a collaborator",
        )

    collaborator = await _get_collaborator(db, plan_id, user.id)
    if collaborator is not None:
        if collaborator.role == collaborator_data.role:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"User is already a {collaborator.role} on this plan",
            )
        collaborator.role = collaborator_data.role
        await db.commit()
        await db.refresh(collaborator)
        response.status_code = status.HTTP_200_OK
        return {"collaborator": collaborator, "updated": True}

    collaborator = CurriculumPlanCollaborator(
        plan_id=plan_id, user_id=user.id, role=collaborator_data.role
    )
    db.add(collaborator)
    await db.commit()
    await db.refresh(collaborator)

    return {"collaborator": collaborator, "updated": False}


@router.delete(
    "/plans/{plan_id}/collaborators/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_collaborator(
    plan_id: UUID,
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await _plan_with_role(db, plan_id, current_user, MANAGE_ROLES)

    collaborator = await _get_collaborator(db, plan_id, user_id)
    if collaborator is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User is not a collaborator on this plan",
        )

    await db.delete(collaborator)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Comments
# ----------------------------------------------------------------------


@router.post(
    "/plans/{plan_id}/comments", response_model=CommentSchema, status_code=status.HTTP_201_CREATED
)
async def add_comment(
    plan_id: UUID,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurriculumPlanComment:
    await _plan_with_role(db, plan_id, current_user, EDIT_ROLES)

    comment = CurriculumPlanComment(
        plan_id=plan_id, user_id=current_user.id, content=comment_data.content
    )
    db.add(comment)
    await db.commit()
    await db.refresh(comment)

    return comment


@router.delete(
    "/plans/{plan_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_comment(
    plan_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a comment (its author, the plan owner or an admin)."""
    _plan, role = await _plan_with_role(db, plan_id, current_user)

    result = await db.execute(
        select(CurriculumPlanComment).where(
            CurriculumPlanComment.id == comment_id, CurriculumPlanComment.plan_id == plan_id
        )
    )
    comment = result.scalar_one_or_none()

    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Comment not found with ID: {comment_id}",
        )

    if comment.user_id != current_user.id and role not in MANAGE_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the author, the plan owner or an admin can delete this comment",
        )

    await db.delete(comment)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Tasks
# ----------------------------------------------------------------------


async def _get_task_or_404(db: AsyncSession, plan_id: UUID, task_id: UUID) -> CurriculumPlanTask:
    result = await db.execute(
        select(CurriculumPlanTask).where(
            CurriculumPlanTask.id == task_id, CurriculumPlanTask.plan_id == plan_id
        )
    )
    task = result.scalar_one_or_none()

    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task not found with ID: {task_id}",
        )

    return task


@router.post("/plans/{plan_id}/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    plan_id: UUID,
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurriculumPlanTask:
    await _plan_with_role(db, plan_id, current_user, EDIT_ROLES)

    if task_data.assigned_to_id:
        await _get_user_or_404(db, user_id=task_data.assigned_to_id, email=None)

    task = CurriculumPlanTask(**task_data.model_dump(), plan_id=plan_id, creator_id=current_user.id)
    db.add(task)
    await db.commit()
    await db.refresh(task)

    return task


@router.patch("/plans/{plan_id}/tasks/{task_id}", response_model=TaskSchema)
async def update_task(
    plan_id: UUID,
    task_id: UUID,
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CurriculumPlanTask:
    await _plan_with_role(db, plan_id, current_user, EDIT_ROLES)
    task = await _get_task_or_404(db, plan_id, task_id)

    update_data = task_update.model_dump(exclude_unset=True)
    if update_data.get("assigned_to_id"):
        await _get_user_or_404(db, user_id=update_data["assigned_to_id"], email=None)

    for field, value in update_data.items():
        setattr(task, field, value)

    await db.commit()
    await db.refresh(task)

    return task


@router.delete("/plans/{plan_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    plan_id: UUID,
    task_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a task (its creator, its assignee, the plan owner or an admin)."""
    _plan, role = await _plan_with_role(db, plan_id, current_user)
    task = await _get_task_or_404(db, plan_id, task_id)

    if current_user.id not in (task.creator_id, task.assigned_to_id) and role not in MANAGE_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the creator, the assignee, the plan owner or an admin can delete this task",
        )

    await db.delete(task)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
