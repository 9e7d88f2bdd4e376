"""Domain exceptions for engine and CLI diagnostics."""

from __future__ import annotations


class ContentStageError(RuntimeError):
    """Raised when a specific engine stage fails in a way callers must handle."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped engine error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class MissingSelectorError(ContentStageError):
    """Raised when a branch has no selector value in the node nor in scope."""

    def __init__(self, selector_key: str, branch_id: int | None = None) -> None:
        """Initialize the error for the branch selector that could not be bound."""

        location = f" (branch id {branch_id})" if branch_id is not None else ""
        super().__init__(
            stage="reconcile",
            detail=f"No value bound for branch selector `{selector_key}`{location}.",
            hint=f"Pass `{selector_key}` in the render variables or author it on the branch.",
        )
        self.selector_key = selector_key
        self.branch_id = branch_id
