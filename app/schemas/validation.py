"""Raw error descriptors produced by OpenAPI request/response validators."""

from pydantic import BaseModel, ConfigDict, Field


class ValidatorError(BaseModel):
    """One validator error; error_code is dotted, e.g. "required.openapi.validation"."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    path: str = ""
    message: str = ""
    error_code: str = Field(default="", alias="errorCode")
    location: str | None = None
    pointer: list[str] = Field(
        default_factory=list,
        description="Pointer-path into the OpenAPI spec; empty means the endpoint's operation.",
    )
