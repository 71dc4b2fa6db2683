import pytest
from pydantic import ValidationError

from schemas.student import StudentListQuery, UpdateStudentSchema


def test_list_query_defaults():
    query = StudentListQuery()
    assert (query.limit, query.page, query.sort, query.populate) == (10, 1, "desc", "No")
    assert query.offset == 0
    assert not query.include_courses


def test_list_query_offset():
    assert StudentListQuery(limit=25, page=3).offset == 50


def test_list_query_only_courses_populates():
    assert StudentListQuery(populate="courses").include_courses
    assert not StudentListQuery(populate="Courses").include_courses


def test_list_query_normalises_sort():
    assert StudentListQuery(sort="ASC").sort == "asc"


def test_list_query_rejects_page_below_one():
    with pytest.raises(ValidationError):
        StudentListQuery(page=0)


def test_update_schema_keeps_only_sent_fields():
    assert UpdateStudentSchema(name="X").model_dump(exclude_unset=True) == {"name": "X"}
