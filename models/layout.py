"""Result type of the scale-to-fit search."""

from pydantic import BaseModel, ConfigDict, Field


class ScaleResult(BaseModel):
    """Scale chosen for a content block and its height when rendered at it.

    ``scale`` is 1.0 unless shrinking was needed.  ``height_px`` may still
    exceed the target when even the floor scale does not fit; the caller
    decides whether to paginate or accept the overflow.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    scale: float = Field(gt=0.0, le=1.0)
    height_px: float = Field(gt=0.0)

    @property
    def shrunk(self) -> bool:
        return self.scale < 1.0
