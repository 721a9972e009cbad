"""
Résumé document model.

Field names follow the builder's camelCase JSON; Python code uses the
snake_case attribute names.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .sanitize import is_safe_image_url, normalize_phone_number, sanitize_resume_data


class _ResumeModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null means "not filled in"; fall back to the field default
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_scalars(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class PersonalInfo(_ResumeModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    title: str = ""
    profile_image: str = ""
    date_of_birth: str = ""
    gender: str = ""
    nationality: str = ""
    marital_status: str = ""
    country: str = ""

    @field_validator("phone", mode="after")
    @classmethod
    def _western_digits(cls, value: str) -> str:
        return normalize_phone_number(value)

    @field_validator("profile_image", mode="after")
    @classmethod
    def _image_url(cls, value: str) -> str:
        # rendered as an <img src>; anything but http(s) or data:image is dropped
        return value if is_safe_image_url(value) else ""


class Experience(_ResumeModel):
    job_title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""


class Education(_ResumeModel):
    degree: str = ""
    field: str = ""
    school: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    achievements: str = ""


class Skill(_ResumeModel):
    name: str = ""
    level: str = ""


class Language(_ResumeModel):
    name: str = ""
    proficiency: str = ""


class Certification(_ResumeModel):
    name: str = ""
    issuer: str = ""
    date: str = ""


class Project(_ResumeModel):
    name: str = ""
    description: str = ""
    technologies: str = ""
    link: str = ""


class ResumeData(_ResumeModel):
    """Structured résumé content posted by the builder."""

    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[Skill] = Field(default_factory=list)
    languages: list[Language] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _sanitize(cls, data: Any) -> Any:
        return sanitize_resume_data(data)
