from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from uniplan.api.deps import get_db
from uniplan.schemas.lecturer import WorkloadReportOut
from uniplan.services.workload import build_workload_report

router = APIRouter()


@router.get("/workload", response_model=WorkloadReportOut)
def get_workload_report(
    academic_year: str | None = Query(default=None, max_length=20),
    semester_id: str | None = Query(default=None, max_length=36),
    lecturer_id: str | None = Query(default=None, max_length=36),
    db: Session = Depends(get_db),
) -> WorkloadReportOut:
    return build_workload_report(
        db,
        academic_year=academic_year,
        semester_id=semester_id,
        lecturer_id=lecturer_id,
    )
