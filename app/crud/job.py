"""
CRUD operations for Job records.

Statements are plain SQL assembled by app.core.sql, so partial updates and
listing filters only ever bind caller values as parameters. Each function
takes the request's Session and commits its own writes.
"""

import logging
from typing import Any, List, Mapping, Optional, Union
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.sql import PlaceholderSequence, bind_positional, compile_filter, compile_update
from app.schemas.job import (
    CompanySummary,
    JobCreateRequest,
    JobDetail,
    JobFilter,
    JobListItem,
    JobResponse,
)

logger = logging.getLogger(__name__)

# Field names already match column names for jobs
JOB_COLUMN_ALIASES: Mapping[str, str] = {}

_RETURNING = "RETURNING id, title, salary, equity, company_handle"

_LIST_SQL = """SELECT j.id,
       j.title,
       j.salary,
       j.equity,
       j.company_handle,
       c.name AS company_name
  FROM jobs AS j
       LEFT JOIN companies AS c ON j.company_handle = c.handle"""


def create(db: Session, job_data: JobCreateRequest) -> JobResponse:
    """
    Insert a new job.

    Duplicates are allowed: a company may open several identical positions.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        The stored job, including its generated id
    """
    sequence = PlaceholderSequence()
    placeholders = ", ".join(
        sequence.add(value)
        for value in (job_data.title, job_data.salary, job_data.equity, job_data.company_handle)
    )
    statement, params = sequence.bind(
        f"INSERT INTO jobs (title, salary, equity, company_handle) VALUES ({placeholders}) {_RETURNING}"
    )

    row = db.execute(statement, params).mappings().first()
    db.commit()

    return JobResponse.model_validate(dict(row))


def get_multi(db: Session, filters: Optional[Union[JobFilter, Mapping[str, Any]]] = None) -> List[JobListItem]:
    """
    List jobs with their company name, ordered by id.

    Args:
        db: Database session
        filters: Optional criteria; missing or empty means every job

    Returns:
        List of jobs
    """
    where_clause, values = compile_filter(filters)

    sql = _LIST_SQL
    if where_clause:
        sql += f"\n WHERE {where_clause}"
    sql += "\n ORDER BY j.id"

    logger.debug("Listing jobs with filter %r and %d bound values", where_clause, len(values))
    statement, params = bind_positional(sql, values)
    rows = db.execute(statement, params).mappings().all()

    return [JobListItem.model_validate(dict(row)) for row in rows]


def get_by_id(db: Session, job_id: int) -> JobDetail:
    """
    Retrieve a job and a summary of its company.

    The job and the company are read separately; if the company vanishes
    between the two reads the job is returned with company=None.

    Raises:
        NotFoundError: If no job has this id
    """
    statement, params = bind_positional(
        "SELECT id, title, salary, equity, company_handle FROM jobs WHERE id = $1",
        [job_id]
    )
    job = db.execute(statement, params).mappings().first()
    if job is None:
        raise NotFoundError(f"Job with id {job_id} not found")

    statement, params = bind_positional(
        "SELECT handle, name, description, num_employees, logo_url FROM companies WHERE handle = $1",
        [job["company_handle"]]
    )
    company = db.execute(statement, params).mappings().first()

    return JobDetail(
        id=job["id"],
        title=job["title"],
        salary=job["salary"],
        equity=job["equity"],
        company=CompanySummary.model_validate(dict(company)) if company else None,
    )


def update(db: Session, job_id: int, fields: Mapping[str, Any]) -> JobResponse:
    """
    Apply a partial update to a job.

    Args:
        db: Database session
        job_id: Job ID to update
        fields: Column -> new value; only these columns change

    Returns:
        The updated job

    Raises:
        BadRequestError: If `fields` is empty (nothing is sent to the database)
        NotFoundError: If no job has this id
    """
    set_clause, sequence = compile_update(fields, JOB_COLUMN_ALIASES)
    id_placeholder = sequence.add(job_id)

    sql = f"UPDATE jobs SET {set_clause} WHERE id = {id_placeholder} {_RETURNING}"
    logger.debug("Updating job %s: %s", job_id, sql, extra={"job_id": job_id})
    statement, params = sequence.bind(sql)

    row = db.execute(statement, params).mappings().first()
    if row is None:
        db.rollback()
        raise NotFoundError(f"Job with id {job_id} not found")
    db.commit()

    return JobResponse.model_validate(dict(row))


def delete(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If no job has this id
    """
    statement, params = bind_positional("DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])

    row = db.execute(statement, params).first()
    if row is None:
        db.rollback()
        raise NotFoundError(f"Job with id {job_id} not found")
    db.commit()
