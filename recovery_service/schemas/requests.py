from pydantic import BaseModel, Field

from recovery_service.domain.entities import Channel


class RecoveryRequestIn(BaseModel):
    username: str = Field(
        ..., description="The account identifier", min_length=1, max_length=255
    )
    channel: Channel = Field(..., description="Where to send the code")


class RecoveryConfirmIn(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=4, max_length=12)


class RecoveryCompleteIn(BaseModel):
    token: str = Field(..., min_length=1, max_length=2048)
    password: str = Field(..., description="The new password", max_length=128)


class IdentityRequestIn(RecoveryRequestIn):
    pass


class IdentityConfirmIn(RecoveryConfirmIn):
    pass
