"""Small value types shared by several schemas."""

from pydantic import BaseModel


class CustomField(BaseModel):
    name: str
    value: str = ""
