# backend/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Base configuration: ORM compatibility and camelCase JSON keys
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class OkResponse(ORMBase):
    ok: bool = True
