from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CamelSchema(BaseModel):
    """Populates by field name as well as by any alias a field declares."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )
