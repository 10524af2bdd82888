"""
Saved analysis API endpoints.

Analyses store only flat input fields; results are recomputed on read.
"""

from typing import Optional, List

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from dealcalc.api.calculations import analysis_to_dict
from dealcalc.db.database import get_db
from dealcalc.db.models import PropertyAnalysis
from dealcalc.services import analysis_store
from dealcalc.services.analysis_store import AnalysisNotFound

router = APIRouter()


class AnalysisFields(BaseModel):
    """Flat analysis record. Omitted fields fall back to defaults when calculating."""

    name: Optional[str] = None
    property_address: Optional[str] = None
    notes: Optional[str] = None

    # Property
    purchase_price: Optional[float] = None
    closing_costs: Optional[float] = None
    rehab_costs: Optional[float] = None
    arv: Optional[float] = None

    # Rehab breakdown
    rehab_roof: Optional[float] = None
    rehab_paint: Optional[float] = None
    rehab_floors: Optional[float] = None
    rehab_cabinets: Optional[float] = None
    rehab_electrical: Optional[float] = None
    rehab_plumbing: Optional[float] = None
    rehab_framing: Optional[float] = None
    rehab_landscaping: Optional[float] = None
    rehab_foundation: Optional[float] = None
    rehab_misc: Optional[float] = None
    rehab_user_cash: Optional[float] = None
    rehab_debt: Optional[float] = None

    # Holding costs
    annual_property_taxes: Optional[float] = None
    annual_insurance: Optional[float] = None
    monthly_utilities: Optional[float] = None
    short_term_months_held: Optional[int] = None

    # Financing
    down_payment_amount: Optional[float] = None
    down_payment_percent: Optional[float] = None
    short_term_loan_amount: Optional[float] = None
    short_term_interest_rate: Optional[float] = None
    short_term_loan_term_months: Optional[int] = None
    short_term_points: Optional[float] = None
    refinance_ltv: Optional[float] = None
    interest_rate: Optional[float] = None
    loan_term_years: Optional[int] = None
    refinance_points: Optional[float] = None

    # Long-term rental
    ltr_monthly_rent: Optional[float] = None
    ltr_vacancy_rate: Optional[float] = None
    ltr_property_management_percent: Optional[float] = None
    ltr_maintenance_reserve_percent: Optional[float] = None
    ltr_other_monthly_expenses: Optional[float] = None
    ltr_appreciation_rate: Optional[float] = None
    ltr_additional_cash_invested: Optional[float] = None
    rent_appreciation_rate: Optional[float] = None

    # Short-term rental
    str_average_nightly_rate: Optional[float] = None
    str_occupancy_rate: Optional[float] = None
    str_cleaning_fee: Optional[float] = None
    str_average_stay_length: Optional[float] = None
    str_high_season_rate_multiplier: Optional[float] = None
    str_low_season_rate_multiplier: Optional[float] = None
    str_management_fee_percent: Optional[float] = None
    str_furnishing_costs: Optional[float] = None
    str_monthly_operating_expenses: Optional[float] = None

    # Flip
    flip_rehab_timeline_months: Optional[int] = None
    flip_monthly_holding_costs: Optional[float] = None
    flip_agent_commission_percent: Optional[float] = None
    flip_selling_closing_costs_percent: Optional[float] = None


class AnalysisResponse(AnalysisFields):
    """Schema for analysis response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    app_version: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AnalysisListResponse(BaseModel):
    """Response for listing analyses."""

    analyses: List[AnalysisResponse]
    total: int


def analysis_to_response(record: PropertyAnalysis) -> AnalysisResponse:
    """Convert PropertyAnalysis model to response schema."""
    fields = analysis_store.record_to_fields(record)
    return AnalysisResponse(
        id=record.id,
        app_version=record.app_version,
        created_at=record.created_at.isoformat() if record.created_at else None,
        updated_at=record.updated_at.isoformat() if record.updated_at else None,
        **fields,
    )


def _get_or_404(db: Session, analysis_id: str) -> PropertyAnalysis:
    try:
        return analysis_store.get_analysis(db, analysis_id)
    except AnalysisNotFound:
        raise HTTPException(status_code=404, detail="Analysis not found")


@router.get("/", response_model=AnalysisListResponse)
async def list_analyses(
    skip: int = 0,
    limit: int = 100,
    owner_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List saved analyses, most recently updated first."""
    records, total = analysis_store.list_analyses(
        db, skip=skip, limit=limit, owner_id=owner_id
    )
    return AnalysisListResponse(
        analyses=[analysis_to_response(r) for r in records],
        total=total,
    )


@router.post("/", response_model=AnalysisResponse, status_code=201)
async def create_analysis(
    analysis_data: AnalysisFields,
    owner_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Create a new analysis."""
    record = analysis_store.create_analysis(
        db, analysis_data.model_dump(exclude_unset=True), owner_id=owner_id
    )
    return analysis_to_response(record)


@router.get("/{analysis_id}", response_model=AnalysisResponse)
async def get_analysis(
    analysis_id: str,
    db: Session = Depends(get_db),
):
    """Get an analysis by ID."""
    return analysis_to_response(_get_or_404(db, analysis_id))


@router.put("/{analysis_id}", response_model=AnalysisResponse)
async def update_analysis(
    analysis_id: str,
    analysis_data: AnalysisFields,
    db: Session = Depends(get_db),
):
    """Update an analysis. Only provided fields are changed."""
    try:
        record = analysis_store.update_analysis(
            db, analysis_id, analysis_data.model_dump(exclude_unset=True)
        )
    except AnalysisNotFound:
        raise HTTPException(status_code=404, detail="Analysis not found")

    return analysis_to_response(record)


@router.delete("/{analysis_id}")
async def delete_analysis(
    analysis_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete an analysis."""
    try:
        analysis_store.delete_analysis(db, analysis_id)
    except AnalysisNotFound:
        raise HTTPException(status_code=404, detail="Analysis not found")

    return {"deleted": True, "id": analysis_id}


@router.get("/{analysis_id}/results")
async def get_analysis_results(
    analysis_id: str,
    db: Session = Depends(get_db),
):
    """Recompute results from the stored inputs."""
    record = _get_or_404(db, analysis_id)
    inputs = analysis_store.record_to_inputs(record)

    return {
        "analysis_id": analysis_id,
        "results": analysis_to_dict(inputs),
    }
