"""
Shared Model Base

Base pydantic model for documents exposed over the JSON API.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model with camelCase wire aliases.

    Stored documents use snake_case field names; the wire format uses
    camelCase aliases. Either form is accepted on input. Enums are stored
    as their plain string values.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )
