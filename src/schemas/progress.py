"""Progress reporting for batch downloads."""

from pydantic import BaseModel, Field, model_validator


class ProgressStatus(BaseModel):
    """Completed/total counts of a running batch.

    Attributes:
        completed: Number of processed items (successful or not)
        total: Size of the batch, fixed when the batch starts
    """

    completed: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "ProgressStatus":
        if self.completed > self.total:
            raise ValueError(
                f"completed ({self.completed}) exceeds total ({self.total})"
            )
        return self

    @property
    def finished(self) -> bool:
        return self.completed == self.total

    @property
    def is_idle(self) -> bool:
        return self.total == 0

    @classmethod
    def idle(cls) -> "ProgressStatus":
        """The "no progress" signal."""
        return cls(completed=0, total=0)
