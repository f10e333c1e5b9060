from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignedRequest(CamelModel):
    """Body of every mutating contract route. The key is used in-memory only, never stored."""

    private_key: str = Field(min_length=1, repr=False)
