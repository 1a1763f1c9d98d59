# app/api/v1/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Uppercase snake case, e.g. IN_REVIEW
STATUS_CODE_PATTERN = r"^[A-Z][A-Z0-9_]*$"

# Lowercase words joined by single hyphens, e.g. front-end
TAG_NAME_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON while keeping snake_case attributes"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )
