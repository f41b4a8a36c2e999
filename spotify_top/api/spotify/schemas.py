from pydantic import BaseModel


class CacheClearResponse(BaseModel):
    message: str
