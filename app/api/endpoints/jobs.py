import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import BadRequestError
from app.crud import job as job_crud
from app.schemas.job import (
    JobCreateRequest,
    JobDeleteResponse,
    JobDetailEnvelope,
    JobEnvelope,
    JobFilter,
    JobListEnvelope,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)

# SQLSTATE for foreign_key_violation
FOREIGN_KEY_VIOLATION = "23503"


def _is_foreign_key_violation(error: IntegrityError) -> bool:
    """PostgreSQL reports a pgcode; SQLite only says so in the message."""
    if getattr(error.orig, "pgcode", None) == FOREIGN_KEY_VIOLATION:
        return True
    return "FOREIGN KEY" in str(error.orig).upper()


@router.post("/", status_code=201, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job posting.

    Body: { title, salary, equity, companyHandle }. Identical postings may
    be created more than once.
    """
    try:
        new_job = job_crud.create(db, request)
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Rejected job for company {request.company_handle}: {e.orig}")
        if _is_foreign_key_violation(e):
            raise BadRequestError(f"Company {request.company_handle} does not exist")
        raise BadRequestError("Job violates a database constraint")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create job: {str(e)}")

    logger.info(f"Created job {new_job.id}: {new_job.title} at {new_job.company_handle}", extra={"job_id": new_job.id})
    return {"job": new_job}


@router.get("/", response_model=JobListEnvelope)
def list_jobs(
    title: Optional[str] = Query(None, min_length=1, description="Case-insensitive match on part of the title"),
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity", description="Only jobs with nonzero equity"),
    db: Session = Depends(get_db)
):
    """
    List all jobs, each with its company name, ordered by id.

    Optional filters, combined with AND:
    - title: case-insensitive, partial match
    - minSalary: salary at least this amount
    - hasEquity: when true, only jobs with equity above zero
    """
    filters = JobFilter(title=title, min_salary=min_salary, has_equity=has_equity)

    try:
        jobs = job_crud.get_multi(db, None if filters.is_empty() else filters)
    except SQLAlchemyError as e:
        logger.error(f"Error listing jobs: {e}")
        raise HTTPException(status_code=500, detail="Failed to list jobs")

    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.

    The response nests the owning company:
    { handle, name, description, numEmployees, logoUrl }
    """
    return {"job": job_crud.get_by_id(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a job.

    Fields can be { title, salary, equity }; omitted fields are left as
    they are. An empty body is rejected with 400.
    """
    fields = request.model_dump(exclude_unset=True)

    try:
        job = job_crud.update(db, job_id, fields)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update job: {str(e)}")

    logger.info(f"Updated job {job_id}: {sorted(fields)}", extra={"job_id": job_id})
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeleteResponse)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    try:
        job_crud.delete(db, job_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to delete job: {str(e)}")

    logger.info(f"Deleted job {job_id}", extra={"job_id": job_id})
    return {"deleted": job_id}
