"""Common response helpers shared by every endpoint."""

from pydantic import BaseModel


def envelope(data, message: str, status: int = 200) -> dict:
    """
    Build the JSON-ready success envelope ``{status, data, message}``.

    ``data`` may be a schema, a list of schemas, or a plain value.
    """
    if isinstance(data, BaseModel):
        payload = data.model_dump(mode="json")
    elif isinstance(data, list):
        payload = [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in data
        ]
    else:
        payload = data
    return {"status": status, "data": payload, "message": message}
