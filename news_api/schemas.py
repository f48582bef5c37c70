from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

# Range of a Postgres INTEGER column; values outside it are rejected before
# they reach the driver.
PG_INT_MIN = -(2**31)
PG_INT_MAX = 2**31 - 1

ArticleId = Annotated[int, Path(ge=PG_INT_MIN, le=PG_INT_MAX)]


# --- Comment ---

class CommentCreate(BaseModel):
    """Body of POST /api/articles/{article_id}/comments: exactly these two fields."""

    username: StrictStr = Field(min_length=1)
    body: StrictStr = Field(min_length=1)
    model_config = ConfigDict(extra="forbid")


# --- Article ---

class VoteUpdate(BaseModel):
    """Body of PATCH /api/articles/{article_id}; ``inc_votes`` may be negative or zero."""

    inc_votes: StrictInt = Field(ge=PG_INT_MIN, le=PG_INT_MAX)
