"""Request and response models for the HTTP API.

Every response uses the ``{success, data?, error?, message?}`` envelope.
Request models reject unknown and wrong-typed fields.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from cap_manager.store import Requirement, record_to_dict


class RequirementModel(BaseModel):
    """A requirement in its persisted JSON shape."""

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: str
    status: str
    notes: str
    created: str
    updated: str
    external_link: str | None = Field(default=None, alias="externalLink")

    @classmethod
    def from_requirement(cls, req: Requirement) -> "RequirementModel":
        return cls.model_validate(record_to_dict(req))


class CreateRequirementRequest(BaseModel):
    """Body of ``POST /api/requirements``.

    Title and description default to empty so that missing values are
    reported by the store as "Title is required" / "Description is required".
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="forbid", strict=True, populate_by_name=True
    )

    title: str = ""
    description: str = ""
    external_link: str | None = Field(default=None, alias="externalLink")


class UpdateRequirementRequest(BaseModel):
    """Body of ``PUT /api/requirements/{id}``; omitted or null means no change."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="forbid", strict=True, populate_by_name=True
    )

    title: str | None = None
    description: str | None = None
    status: str | None = None
    notes: str | None = None
    external_link: str | None = Field(default=None, alias="externalLink")


class RequirementResponse(BaseModel):
    success: bool = True
    data: RequirementModel
    message: str | None = None


class RequirementListResponse(BaseModel):
    success: bool = True
    data: list[RequirementModel]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str | None = None
