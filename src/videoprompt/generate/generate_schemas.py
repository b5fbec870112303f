"""Pydantic schemas for generate requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class UriSubmissionSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    style_uri: str | None = Field(default=None, alias="styleUri")
    target_uri: str | None = Field(default=None, alias="targetUri")


class GenerateResultSchema(BaseModel):
    result: str


class GenerateErrorSchema(BaseModel):
    error: str
    details: str | None = None
    failure_reason: str


class ModelInfoSchema(BaseModel):
    name: str
    display_name: str | None = None


class ModelListSchema(BaseModel):
    models: list[ModelInfoSchema]
