from typing import Literal

from pydantic import BaseModel, Field


class AcceptedOut(BaseModel):
    status: Literal["accepted"] = "accepted"


class OkOut(BaseModel):
    status: Literal["ok"] = "ok"


class ConfirmationTokenOut(BaseModel):
    token: str = Field(..., description="Single-use proof that the code was confirmed")
