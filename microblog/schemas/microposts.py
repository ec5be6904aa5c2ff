from datetime import datetime
from pydantic import BaseModel, ConfigDict


class MicropostIn(BaseModel):
    content: str


class MicropostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    content: str
    created_at: datetime
