from pydantic import BaseModel
from pydantic import ConfigDict


class FrozenModel(BaseModel):
    """Immutable pydantic model: values like poll outcomes and bounds are snapshots, never updated in place."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=False,
    )
