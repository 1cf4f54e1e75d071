"""
Wire-format schemas for Person.

Incoming and outgoing JSON use the Portuguese field names (`apelido`, `nome`,
`nascimento`, `stack`). Input also accepts the attribute names (`nickname`, ...).
"""
import re
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Plain calendar date only: no time part, no basic format, no week dates
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class PersonCreate(BaseModel):
    """Body of POST /pessoas."""

    model_config = ConfigDict(populate_by_name=True)

    nickname: str = Field(alias="apelido", min_length=1)
    name: str = Field(alias="nome", min_length=1)
    dob: date = Field(alias="nascimento")
    # None (absent/null) and [] are different states and must both survive
    stacks: list[str] | None = Field(default=None, alias="stack")

    @field_validator("dob", mode="before")
    @classmethod
    def dob_must_be_iso_string(cls, value):
        # pydantic would otherwise accept unix timestamps and midnight datetimes
        if isinstance(value, date) and not isinstance(value, datetime):
            return value
        if isinstance(value, str) and _ISO_DATE.fullmatch(value):
            try:
                return date.fromisoformat(value)
            except ValueError:
                pass
        raise ValueError("must be an ISO 8601 date string (YYYY-MM-DD)")


class PersonRead(BaseModel):
    """Person as returned by every read/create endpoint."""

    # populate_by_name: built from ORM attributes by name, re-read by alias when
    # FastAPI validates the dumped response
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    nickname: str = Field(alias="apelido")
    name: str = Field(alias="nome")
    dob: date = Field(alias="nascimento")
    stacks: list[str] | None = Field(default=None, alias="stack")
