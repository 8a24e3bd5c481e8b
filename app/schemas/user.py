from pydantic import BaseModel

class CurrentUser(BaseModel):
    """Identity attached by the auth dependency; trusted as already verified."""
    id: int
