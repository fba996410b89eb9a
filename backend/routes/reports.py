# routes/reports.py
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from database import get_db
from models.pharmacy import Pharmacy
from schemas.reports import ArchiveReport, DashboardOut
from utils.pdf import generate_archive_pdf
from utils.reports import archive_report, dashboard
from utils.tokenJWT import get_current_pharmacy

router = APIRouter(prefix="/reports", tags=["Reports"])

Period = Literal["today", "week", "month", "all"]

# -----------------------------
# 1) Own archive by period
# -----------------------------
@router.get("/archive", response_model=ArchiveReport)
def report_archive(
    period: Period = Query("month", description="today, week (from Sunday), month or all"),
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    return archive_report(db, pharmacy.pharmacy_id, period)


@router.get("/archive.pdf")
def report_archive_pdf(
    period: Period = Query("month"),
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    report = archive_report(db, pharmacy.pharmacy_id, period)
    pdf = generate_archive_pdf(report, pharmacy.pharmacy_name)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="archive-{pharmacy.pharmacy_id}-{period}.pdf"'},
    )

# -----------------------------
# 2) Owner dashboard
# -----------------------------
@router.get("/dashboard", response_model=DashboardOut)
def report_dashboard(
    db: Session = Depends(get_db),
    pharmacy: Pharmacy = Depends(get_current_pharmacy),
):
    return dashboard(db, pharmacy.pharmacy_id)
