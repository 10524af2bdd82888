"""
Saved analysis store.

Maps flat PropertyAnalysis records to calculator inputs and back,
filling missing fields with defaults at this boundary. Writes to the
same analysis id are serialized so overlapping autosaves do not race.
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from dealcalc.calculations.analysis import AnalysisInputs, build_property_inputs
from dealcalc.calculations.models import (
    FinancingInputs,
    FlipInputs,
    HoldingCosts,
    LTRInputs,
    RehabBreakdown,
    STRInputs,
)
from dealcalc.config import get_settings
from dealcalc.db.models import PropertyAnalysis

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_CASH_AMOUNT = 60000.0

# Defaults applied when a stored field is missing
FIELD_DEFAULTS: Dict[str, Any] = {
    "purchase_price": 300000.0,
    "closing_costs": 6000.0,
    "rehab_costs": 15000.0,
    "arv": 350000.0,
    "rehab_roof": 0.0,
    "rehab_paint": 0.0,
    "rehab_floors": 0.0,
    "rehab_cabinets": 0.0,
    "rehab_electrical": 0.0,
    "rehab_plumbing": 0.0,
    "rehab_framing": 0.0,
    "rehab_landscaping": 0.0,
    "rehab_foundation": 0.0,
    "rehab_misc": 0.0,
    "rehab_user_cash": 0.0,
    "rehab_debt": 0.0,
    "annual_property_taxes": 3600.0,
    "annual_insurance": 1800.0,
    "monthly_utilities": 200.0,
    "short_term_months_held": 6,
    "short_term_loan_amount": 0.0,
    "short_term_interest_rate": 12.0,
    "short_term_loan_term_months": 12,
    "short_term_points": 2.0,
    "refinance_ltv": 75.0,
    "interest_rate": 7.0,
    "loan_term_years": 30,
    "refinance_points": 1.0,
    "ltr_monthly_rent": 2200.0,
    "ltr_vacancy_rate": 5.0,
    "ltr_property_management_percent": 10.0,
    "ltr_maintenance_reserve_percent": 5.0,
    "ltr_other_monthly_expenses": 100.0,
    "ltr_appreciation_rate": 3.0,
    "ltr_additional_cash_invested": 0.0,
    "rent_appreciation_rate": 2.0,
    "str_average_nightly_rate": 150.0,
    "str_occupancy_rate": 65.0,
    "str_cleaning_fee": 100.0,
    "str_average_stay_length": 3.0,
    "str_high_season_rate_multiplier": 1.3,
    "str_low_season_rate_multiplier": 0.7,
    "str_management_fee_percent": 20.0,
    "str_furnishing_costs": 15000.0,
    "str_monthly_operating_expenses": 300.0,
    "flip_rehab_timeline_months": 3,
    "flip_monthly_holding_costs": 800.0,
    "flip_agent_commission_percent": 6.0,
    "flip_selling_closing_costs_percent": 2.0,
}

INPUT_FIELDS: Tuple[str, ...] = tuple(FIELD_DEFAULTS) + (
    "down_payment_amount",
    "down_payment_percent",
)

TEXT_FIELDS: Tuple[str, ...] = ("name", "property_address", "notes")

# Entries disappear once no writer holds a reference to the lock
_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


class AnalysisNotFound(LookupError):
    """Raised when an analysis id is unknown or deleted."""


@contextmanager
def analysis_write_lock(analysis_id: str) -> Iterator[None]:
    """Serialize writes to one analysis id."""
    with _locks_guard:
        lock = _locks.get(analysis_id)
        if lock is None:
            lock = threading.Lock()
            _locks[analysis_id] = lock
    with lock:
        yield


def _value(fields: Dict[str, Any], name: str) -> Any:
    value = fields.get(name)
    if value is None:
        return FIELD_DEFAULTS[name]
    return value


def _cash_amount(fields: Dict[str, Any]) -> float:
    """Cash at closing, falling back to a stored down payment percent."""
    if fields.get("down_payment_amount") is not None:
        return fields["down_payment_amount"]
    if fields.get("down_payment_percent") is not None:
        purchase_price = _value(fields, "purchase_price")
        return (fields["down_payment_percent"] / 100) * purchase_price
    return DEFAULT_CASH_AMOUNT


def fields_to_inputs(fields: Dict[str, Any]) -> AnalysisInputs:
    """
    Build calculator inputs from flat record fields.

    Missing (None) fields take their defaults. A stored zero is kept.
    """
    def v(name):
        return _value(fields, name)

    return AnalysisInputs(
        address=fields.get("property_address") or "",
        purchase_price=v("purchase_price"),
        closing_costs=v("closing_costs"),
        rehab_costs=v("rehab_costs"),
        arv=v("arv"),
        rehab=RehabBreakdown(
            roof=v("rehab_roof"),
            paint=v("rehab_paint"),
            floors=v("rehab_floors"),
            cabinets=v("rehab_cabinets"),
            electrical=v("rehab_electrical"),
            plumbing=v("rehab_plumbing"),
            framing=v("rehab_framing"),
            landscaping=v("rehab_landscaping"),
            foundation=v("rehab_foundation"),
            misc=v("rehab_misc"),
            user_cash_for_rehab=v("rehab_user_cash"),
            debt_for_rehab=v("rehab_debt"),
        ),
        holding=HoldingCosts(
            annual_property_taxes=v("annual_property_taxes"),
            annual_insurance=v("annual_insurance"),
            monthly_utilities=v("monthly_utilities"),
            short_term_months_held=v("short_term_months_held"),
        ),
        financing=FinancingInputs(
            cash_amount=_cash_amount(fields),
            short_term_loan_amount=v("short_term_loan_amount"),
            short_term_interest_rate=v("short_term_interest_rate"),
            short_term_loan_term_months=v("short_term_loan_term_months"),
            short_term_points=v("short_term_points"),
            refinance_ltv=v("refinance_ltv"),
            refinance_interest_rate=v("interest_rate"),
            refinance_loan_term_years=v("loan_term_years"),
            refinance_points=v("refinance_points"),
        ),
        ltr=LTRInputs(
            monthly_rent=v("ltr_monthly_rent"),
            vacancy_rate=v("ltr_vacancy_rate"),
            property_management_percent=v("ltr_property_management_percent"),
            maintenance_reserve_percent=v("ltr_maintenance_reserve_percent"),
            other_monthly_expenses=v("ltr_other_monthly_expenses"),
            appreciation_rate=v("ltr_appreciation_rate"),
        ),
        additional_cash_invested=v("ltr_additional_cash_invested"),
        rent_appreciation_rate=v("rent_appreciation_rate"),
        str_inputs=STRInputs(
            average_nightly_rate=v("str_average_nightly_rate"),
            occupancy_rate=v("str_occupancy_rate"),
            cleaning_fee=v("str_cleaning_fee"),
            average_stay_length=v("str_average_stay_length"),
            high_season_multiplier=v("str_high_season_rate_multiplier"),
            low_season_multiplier=v("str_low_season_rate_multiplier"),
            management_fee_percent=v("str_management_fee_percent"),
            furnishing_costs=v("str_furnishing_costs"),
            monthly_operating_expenses=v("str_monthly_operating_expenses"),
        ),
        flip=FlipInputs(
            rehab_timeline_months=v("flip_rehab_timeline_months"),
            monthly_holding_costs=v("flip_monthly_holding_costs"),
            agent_commission_percent=v("flip_agent_commission_percent"),
            selling_closing_costs_percent=v("flip_selling_closing_costs_percent"),
        ),
    )


def record_to_fields(record: PropertyAnalysis) -> Dict[str, Any]:
    """Flat input fields of a stored record."""
    return {name: getattr(record, name) for name in INPUT_FIELDS + TEXT_FIELDS}


def record_to_inputs(record: PropertyAnalysis) -> AnalysisInputs:
    return fields_to_inputs(record_to_fields(record))


def inputs_to_fields(inputs: AnalysisInputs) -> Dict[str, Any]:
    """
    Flatten calculator inputs into record fields.

    rehab_costs is stored as the breakdown total whenever the breakdown
    is filled in, so the two never disagree on disk.
    """
    rehab = inputs.rehab
    holding = inputs.holding
    financing = inputs.financing
    ltr = inputs.ltr
    str_inputs = inputs.str_inputs
    flip = inputs.flip

    return {
        "property_address": inputs.address or "Untitled Property",
        "purchase_price": inputs.purchase_price,
        "closing_costs": inputs.closing_costs,
        "rehab_costs": build_property_inputs(inputs).rehab_costs,
        "arv": inputs.arv,
        "rehab_roof": rehab.roof,
        "rehab_paint": rehab.paint,
        "rehab_floors": rehab.floors,
        "rehab_cabinets": rehab.cabinets,
        "rehab_electrical": rehab.electrical,
        "rehab_plumbing": rehab.plumbing,
        "rehab_framing": rehab.framing,
        "rehab_landscaping": rehab.landscaping,
        "rehab_foundation": rehab.foundation,
        "rehab_misc": rehab.misc,
        "rehab_user_cash": rehab.user_cash_for_rehab,
        "rehab_debt": rehab.debt_for_rehab,
        "annual_property_taxes": holding.annual_property_taxes,
        "annual_insurance": holding.annual_insurance,
        "monthly_utilities": holding.monthly_utilities,
        "short_term_months_held": holding.short_term_months_held,
        "down_payment_amount": financing.cash_amount,
        "down_payment_percent": financing.down_payment_percent(inputs.purchase_price),
        "short_term_loan_amount": financing.short_term_loan_amount,
        "short_term_interest_rate": financing.short_term_interest_rate,
        "short_term_loan_term_months": financing.short_term_loan_term_months,
        "short_term_points": financing.short_term_points,
        "refinance_ltv": financing.refinance_ltv,
        "interest_rate": financing.refinance_interest_rate,
        "loan_term_years": financing.refinance_loan_term_years,
        "refinance_points": financing.refinance_points,
        "ltr_monthly_rent": ltr.monthly_rent,
        "ltr_vacancy_rate": ltr.vacancy_rate,
        "ltr_property_management_percent": ltr.property_management_percent,
        "ltr_maintenance_reserve_percent": ltr.maintenance_reserve_percent,
        "ltr_other_monthly_expenses": ltr.other_monthly_expenses,
        "ltr_appreciation_rate": ltr.appreciation_rate,
        "ltr_additional_cash_invested": inputs.additional_cash_invested,
        "rent_appreciation_rate": inputs.rent_appreciation_rate,
        "str_average_nightly_rate": str_inputs.average_nightly_rate,
        "str_occupancy_rate": str_inputs.occupancy_rate,
        "str_cleaning_fee": str_inputs.cleaning_fee,
        "str_average_stay_length": str_inputs.average_stay_length,
        "str_high_season_rate_multiplier": str_inputs.high_season_multiplier,
        "str_low_season_rate_multiplier": str_inputs.low_season_multiplier,
        "str_management_fee_percent": str_inputs.management_fee_percent,
        "str_furnishing_costs": str_inputs.furnishing_costs,
        "str_monthly_operating_expenses": str_inputs.monthly_operating_expenses,
        "flip_rehab_timeline_months": flip.rehab_timeline_months,
        "flip_monthly_holding_costs": flip.monthly_holding_costs,
        "flip_agent_commission_percent": flip.agent_commission_percent,
        "flip_selling_closing_costs_percent": flip.selling_closing_costs_percent,
    }


def _sync_rehab_costs(record: PropertyAnalysis) -> None:
    """Keep the stored rehab_costs equal to a filled-in breakdown total."""
    total = record_to_inputs(record).rehab.total
    if total > 0:
        record.rehab_costs = total


def _active_query(db: Session):
    return db.query(PropertyAnalysis).filter(PropertyAnalysis.is_deleted == False)


def list_analyses(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    owner_id: Optional[str] = None,
) -> Tuple[List[PropertyAnalysis], int]:
    """Saved analyses, most recently updated first, with the total count."""
    query = _active_query(db)
    if owner_id:
        query = query.filter(PropertyAnalysis.owner_id == owner_id)

    total = query.count()
    records = (
        query.order_by(PropertyAnalysis.updated_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return records, total


def get_analysis(db: Session, analysis_id: str) -> PropertyAnalysis:
    record = _active_query(db).filter(PropertyAnalysis.id == analysis_id).first()
    if not record:
        raise AnalysisNotFound(analysis_id)
    return record


def create_analysis(
    db: Session,
    fields: Dict[str, Any],
    owner_id: Optional[str] = None,
) -> PropertyAnalysis:
    """Insert a new analysis from flat fields."""
    known = {k: v for k, v in fields.items() if k in INPUT_FIELDS + TEXT_FIELDS}
    if not known.get("property_address"):
        known["property_address"] = "Untitled Property"

    record = PropertyAnalysis(
        owner_id=owner_id,
        app_version=settings.app_version,
        **known,
    )
    _sync_rehab_costs(record)
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Created analysis {record.id} ({record.name or record.property_address})")
    return record


def update_analysis(
    db: Session, analysis_id: str, fields: Dict[str, Any]
) -> PropertyAnalysis:
    """Apply the provided fields to an existing analysis."""
    with analysis_write_lock(analysis_id):
        record = get_analysis(db, analysis_id)

        for name, value in fields.items():
            if name == "property_address" and not value:
                value = "Untitled Property"
            if name in INPUT_FIELDS + TEXT_FIELDS:
                setattr(record, name, value)
        _sync_rehab_costs(record)
        record.app_version = settings.app_version

        db.commit()
        db.refresh(record)

    logger.info(f"Updated analysis {analysis_id} ({len(fields)} fields)")
    return record


def delete_analysis(db: Session, analysis_id: str) -> None:
    """Soft delete an analysis."""
    with analysis_write_lock(analysis_id):
        record = get_analysis(db, analysis_id)
        record.is_deleted = True
        db.commit()

    logger.info(f"Deleted analysis {analysis_id}")
