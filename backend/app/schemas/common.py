from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Wire format is camelCase (the SPA's convention); Python side stays snake_case.
    Inputs accept either spelling.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class OkOut(APIModel):
    ok: bool = True
