from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str
    password: str
    password_hint: str = ""


class CredentialRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True, populate_by_name=True)

    id: int
    owner_user_id: int
    site: str
    username: str
    secret: str = Field(validation_alias="password")


class SearchScope(Enum):
    ALL = "all"
    SITE = "site"
    USERNAME = "username"


class ExportEntry(BaseModel):
    # key order is part of the export document format
    site: str
    username: str
    password: str


class ImportEntry(ExportEntry):
    site: str = Field(min_length=1)
    username: str = Field(min_length=1)

    @field_validator("site", "username")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ImportOutcome(BaseModel):
    index: int
    ok: bool
    credential_id: int | None = None
    error: str | None = None
