"""Client-side checks performed before any network call."""

import logging
from typing import Any

from .exceptions import PreconditionError, ValidationError
from .models import TaskDraft, TaskPriority

logger = logging.getLogger(__name__)


def require_token(token: str | None) -> str:
    """
    Return the stripped bearer token.

    Raises:
        PreconditionError: If the token is missing or blank
    """
    if not token or not token.strip():
        raise PreconditionError(
            "Not signed in", "A session token is required for this request."
        )
    return token.strip()


def prepare_draft(draft: TaskDraft) -> dict[str, Any]:
    """
    Validate and normalize a task draft into a request body.

    - name must be non-empty
    - assigned_to or assignee_id must be present
    - an invalid priority is dropped so the server default applies
    - an empty description is omitted

    Args:
        draft: Task draft from the caller

    Returns:
        Request body with backend field names

    Raises:
        ValidationError: If the name or the assignee is missing
    """
    name = (draft.name or "").strip()
    if not name:
        raise ValidationError("Task name is required", "Enter a name for the task.")

    assigned_to = (draft.assigned_to or "").strip() or None
    if assigned_to is None and draft.assignee_id is None:
        raise ValidationError(
            "Assignee is required", "Choose who the task is assigned to."
        )

    if isinstance(draft.priority, TaskPriority):
        priority: TaskPriority | None = draft.priority
    else:
        priority = TaskPriority.parse(draft.priority)
        if draft.priority and priority is None:
            logger.debug(
                f"Dropping invalid priority {draft.priority!r}; server default applies"
            )

    body: dict[str, Any] = {
        "projectName": draft.project_name.strip() if draft.project_name else "",
        "projectId": draft.project_id,
        "name": name,
        "assignedTo": assigned_to,
        "assigneeId": draft.assignee_id,
        "dueDate": draft.due_date or None,
    }

    description = (draft.description or "").strip()
    if description:
        body["description"] = description

    if priority is not None:
        body["priority"] = priority.value

    return body
