from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request/response body exchanged with the web client in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def error_body(message: str, **extra) -> dict:
    return {"error": message, **extra}
