"""
Vote Pydantic Schemas

The request accepts `voteType` (the public field name) and `vote_type`.
Unknown values are rejected by the votes service with a 400 and the
`invalid_vote_type` code, so the field is a plain string here.
"""

from pydantic import BaseModel, ConfigDict, Field


class VoteRequest(BaseModel):
    """
    Example request body:
    {"voteType": "up"}
    """

    vote_type: str = Field(
        ...,
        alias="voteType",
        description="'up', 'down' or 'remove'",
        examples=["up"],
    )

    model_config = ConfigDict(populate_by_name=True)


class VoteResponse(BaseModel):
    message: str = Field(..., examples=["Vote recorded successfully"])
    upvotes: int
    downvotes: int
    vote_type: str | None = Field(
        default=None,
        description="The caller's vote after the request, null when none",
    )


class UserVoteResponse(BaseModel):
    group_id: int
    vote_type: str | None = None
