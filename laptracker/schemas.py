from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UserRecord(Record):
    uuid: str
    email: str
    name: str = ""
    role: str
    created_at: datetime


class AccessTokenRecord(Record):
    uuid: str
    created_at: datetime
    expires_at: datetime | None = None
    user_uuid: str


class LapCount(BaseModel):
    laps: int = 0


class RunnerRecord(Record):
    number: int
    first_name: str
    last_name: str
    grade: str = ""
    house: str = ""
    count: LapCount = Field(default_factory=LapCount, alias="_count")

    @classmethod
    def from_row(cls, runner, laps: int) -> "RunnerRecord":
        return cls(
            number=runner.number,
            first_name=runner.first_name,
            last_name=runner.last_name,
            grade=runner.grade,
            house=runner.house,
            count=LapCount(laps=laps),
        )


class RunnerCreate(Record):
    number: int = Field(ge=1)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    grade: str = ""
    house: str = ""
