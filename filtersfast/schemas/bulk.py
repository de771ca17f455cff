from pydantic import BaseModel


class BulkDeleteOut(BaseModel):
    deleted: int
    requested: int
