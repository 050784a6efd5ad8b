# src/api/schemas.py
from typing import List, Optional

from pydantic import BaseModel, Field


# ----- Voting -----
class VoteRequest(BaseModel):
    articleId: str
    guestId: str
    voteType: Optional[str] = Field(default=None, description="'up', 'down' or null to retract")


# ----- Analysis -----
class AnalyzeRequest(BaseModel):
    articleId: str


# ----- Guests -----
class GuestRequest(BaseModel):
    guestId: Optional[str] = Field(default=None, description="Existing token; omit to be issued one")


# ----- Storage -----
class DeleteFilesRequest(BaseModel):
    paths: List[str]
