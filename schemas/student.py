import datetime
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, EmailStr, Field, field_validator

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_PAGE = 1
DEFAULT_SORT = "desc"
DEFAULT_POPULATE = "No"
POPULATE_COURSES = "courses"

# ----------------------------------------
# List query specification
# ----------------------------------------
class StudentListQuery(BaseModel):
    """
    Resolved per request from the query string. Only `populate=courses`
    eagerly loads the course relation; every other value loads bare rows.
    """
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    page: int = Field(DEFAULT_PAGE, ge=1)
    sort: Literal["asc", "desc"] = DEFAULT_SORT
    populate: str = DEFAULT_POPULATE

    @field_validator("sort", mode="before")
    @classmethod
    def sort_lowercase(cls, v):
        return v.lower() if isinstance(v, str) else v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def include_courses(self) -> bool:
        return self.populate == POPULATE_COURSES

# ----------------------------------------
# Create / Update DTOs
# ----------------------------------------
class CreateStudentSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Full name of the student")
    email: Optional[EmailStr] = Field(None, description="Contact email, unique per student")
    age: Optional[int] = Field(None, ge=0, le=150, description="Age in years")

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Student name must not be blank")
        return v


class UpdateStudentSchema(BaseModel):
    """
    Partial update: only fields present in the request body are applied.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    age: Optional[int] = Field(None, ge=0, le=150)

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Student name cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Student name must not be blank")
        return v

# ----------------------------------------
# Nested Course DTO
# ----------------------------------------
class CourseNestedSchema(BaseModel):
    id: int
    title: str
    code: str
    credits: int
    description: Optional[str] = None

    model_config = {"from_attributes": True}

# ----------------------------------------
# Student Response DTOs
# ----------------------------------------
class StudentSchema(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    age: Optional[int] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = {"from_attributes": True}


class StudentWithCoursesSchema(StudentSchema):
    courses: List[CourseNestedSchema] = []

# ----------------------------------------
# List Response DTO
# ----------------------------------------
class PaginationSchema(BaseModel):
    total: int
    limit: int
    page: int
    pages: int
    next_page: Optional[str]
    prev_page: Optional[str]


class StudentListResponse(BaseModel):
    data: List[Union[StudentWithCoursesSchema, StudentSchema]]
    pagination: PaginationSchema


class MessageSchema(BaseModel):
    status: str
    message: str
