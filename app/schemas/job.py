from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Allows conversion from SQLAlchemy models and rows
    )


class CompanySummary(CamelModel):
    """Owning company as nested in a job detail response"""
    handle: str
    name: str
    description: Optional[str] = None
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1, description="Fraction of the company, 0 to 1")
    company_handle: str = Field(..., min_length=1, max_length=25)


class JobUpdateRequest(CamelModel):
    """
    Schema for a partial job update.

    Only the provided fields are written. The id and company handle are
    fixed at creation, so they are not accepted here.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v


class JobFilter(CamelModel):
    """Optional criteria for narrowing a job listing"""
    title: Optional[str] = Field(None, min_length=1, description="Case-insensitive substring of the title")
    min_salary: Optional[int] = Field(None, ge=0)
    has_equity: Optional[bool] = Field(None, description="Only jobs with nonzero equity when true")

    def is_empty(self) -> bool:
        return self.title is None and self.min_salary is None and not self.has_equity


class JobResponse(CamelModel):
    """Schema for a job row"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company_handle: str


class JobListItem(JobResponse):
    """Job row with the owning company's name joined in"""
    company_name: Optional[str] = None


class JobDetail(CamelModel):
    """Single job with its owning company nested"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company: Optional[CompanySummary] = None


class JobEnvelope(BaseModel):
    job: JobResponse


class JobDetailEnvelope(BaseModel):
    job: JobDetail


class JobListEnvelope(BaseModel):
    jobs: List[JobListItem]


class JobDeleteResponse(BaseModel):
    deleted: int
