from datetime import datetime
from math import ceil
from typing import List

from pydantic import BaseModel, Field, field_validator, computed_field

from .config import JobType
from .services.sanitize import sanitize_html


class JobIn(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    company_name: str = Field(min_length=1, max_length=300)
    description: str = ""
    job_type: JobType
    location_country: str = Field(min_length=1, max_length=8)
    location_state: str = Field(min_length=1, max_length=16)
    location_city: str = Field(min_length=1, max_length=120)

    @field_validator("title", "company_name", "location_country", "location_state", "location_city")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("description")
    @classmethod
    def _clean_description(cls, v: str) -> str:
        return sanitize_html(v)


class JobOut(BaseModel):
    id: str
    user_id: str
    created_at: datetime
    title: str
    company_name: str
    description: str
    job_type: str
    location_country: str
    location_state: str
    location_city: str

    class Config:
        from_attributes = True


class ResultPage(BaseModel):
    rows: List[JobOut] = []
    total_count: int = 0
    page: int = 1
    page_size: int = 10

    @computed_field
    @property
    def total_pages(self) -> int:
        return ceil(self.total_count / self.page_size) if self.page_size > 0 else 0


class Principal(BaseModel):
    principal_id: str | None = None


class Country(BaseModel):
    code: str
    name: str


class Subdivision(BaseModel):
    code: str
    name: str


class City(BaseModel):
    name: str
