import logging
import math

from fastapi import (
    APIRouter, Depends, HTTPException,
    Query, Request, status, Body
)
from fastapi.responses import JSONResponse
from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models import Students
from schemas.student import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_POPULATE,
    DEFAULT_SORT,
    MAX_LIMIT,
    CreateStudentSchema,
    UpdateStudentSchema,
    StudentSchema,
    StudentWithCoursesSchema,
    StudentListQuery,
    StudentListResponse,
    MessageSchema,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "Not found"

router = APIRouter(
    prefix="/students",
    tags=["students"],
)


def list_query(
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Items per page"),
    page: int = Query(DEFAULT_PAGE, ge=1, description="Page number (1-indexed)"),
    sort: str = Query(
        DEFAULT_SORT,
        pattern="^(asc|desc|ASC|DESC)$",
        description="Sort direction by id",
    ),
    populate: str = Query(
        DEFAULT_POPULATE,
        description="Use 'courses' to include each student's courses",
    ),
) -> StudentListQuery:
    return StudentListQuery(limit=limit, page=page, sort=sort, populate=populate)


def get_student_or_404(db: Session, student_id: int, with_courses: bool = False) -> Students:
    options = [selectinload(Students.courses)] if with_courses else []
    student = db.get(Students, student_id, options=options)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return student


@router.post(
    "",
    response_model=StudentSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new student",
)
def create_student(
    data: CreateStudentSchema = Body(...),
    db: Session = Depends(get_db),
):
    student = Students(**data.model_dump(exclude_unset=True))
    db.add(student)
    db.commit()
    db.refresh(student)
    logger.info(f"Created student {student.id}")
    return StudentSchema.model_validate(student)


@router.get(
    "",
    response_model=StudentListResponse,
    summary="Retrieve a paginated list of students, optionally with their courses",
)
def list_students(
    request: Request,
    query: StudentListQuery = Depends(list_query),
    db: Session = Depends(get_db),
):
    """
    Page through students ordered by id. `total` counts the whole table;
    courses are attached only when `populate=courses`.
    """
    total = db.query(func.count(Students.id)).scalar()

    q = db.query(Students)
    if query.include_courses:
        q = q.options(selectinload(Students.courses))
    direction = asc if query.sort == "asc" else desc
    raw = q.order_by(direction(Students.id)).offset(query.offset).limit(query.limit).all()

    schema = StudentWithCoursesSchema if query.include_courses else StudentSchema
    data = [schema.model_validate(s).model_dump(mode="json") for s in raw]

    def make_url(p: int) -> str:
        return str(request.url.include_query_params(page=p, limit=query.limit))

    prev_page = make_url(query.page - 1) if query.page > 1 else None
    next_page = make_url(query.page + 1) if query.offset + len(raw) < total else None

    return JSONResponse(
        content={
            "data": data,
            "pagination": {
                "total": total,
                "limit": query.limit,
                "page": query.page,
                "pages": math.ceil(total / query.limit),
                "next_page": next_page,
                "prev_page": prev_page,
            },
        }
    )


@router.get(
    "/{student_id}",
    response_model=StudentWithCoursesSchema,
    summary="Get a single student by ID, including courses",
)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
):
    student = get_student_or_404(db, student_id, with_courses=True)
    return StudentWithCoursesSchema.model_validate(student)


@router.put(
    "/{student_id}",
    response_model=StudentSchema,
    summary="Update an existing student by ID",
)
def update_student(
    student_id: int,
    data: UpdateStudentSchema = Body(...),
    db: Session = Depends(get_db),
):
    """
    Apply only the fields present in the body; everything else is left as stored.
    """
    student = get_student_or_404(db, student_id)

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(student, field, value)
    db.commit()
    db.refresh(student)
    logger.info(f"Updated student {student_id}: {sorted(changes)}")
    return StudentSchema.model_validate(student)


@router.delete(
    "/{student_id}",
    response_model=MessageSchema,
    status_code=status.HTTP_200_OK,
    summary="Delete a student by ID",
)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
):
    student = get_student_or_404(db, student_id)
    db.delete(student)
    db.commit()
    logger.info(f"Deleted student {student_id}")
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"status": "success", "message": "Deleted"},
    )
