from pydantic import BaseModel, model_validator

class TokenPayload(BaseModel):
    """Claims read from a bearer token. Older tokens carry the caller as `id`."""
    user_id: int | None = None
    id: int | None = None
    jti: str | None = None
    exp: int | None = None

    @model_validator(mode="after")
    def fill_user_id(self):
        if self.user_id is None and self.id is not None:
            self.user_id = self.id
        return self
