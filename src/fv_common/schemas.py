"""Base schema for API payloads.

Python attributes stay snake_case; the wire format is camelCase, produced with
model_dump(by_alias=True). populate_by_name lets cached snake_case dumps be
validated back into the model.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """JSON-ready camelCase dict for ApiResponse.data."""
        return self.model_dump(mode="json", by_alias=True)
