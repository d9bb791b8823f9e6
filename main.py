# main.py

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import calculator
import estate
import schemas
from app.rules.classifier import RelationshipRole, partition_family_members
from app.rules.loader import load_references
from config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.app_title}"}


@app.get("/relationships", response_model=list[str])
def read_relationships():
    """Relationship labels recognized for Faraid (case, spaces and underscores are ignored)."""
    return [role.value for role in RelationshipRole]


@app.post("/relationships/partition", response_model=schemas.PartitionResult)
def partition_relationships(payload: schemas.PartitionInput):
    """Split family members into eligible and non-eligible heirs for display."""
    eligible, non_eligible = partition_family_members(payload.family_members, payload.owner_gender)
    return schemas.PartitionResult(eligible=eligible, non_eligible=non_eligible)


@app.get("/references", response_model=list[schemas.FaraidReference])
def read_references():
    return load_references()


@app.post("/calculate", response_model=schemas.CalculationResult)
def run_calculation(calculation_data: schemas.CalculationInput):
    """
    Main endpoint: Faraid shares for one asset value.
    """
    return calculator.calculate_distribution(calculation_data, settings.default_owner_gender)


@app.post("/calculate/estate", response_model=schemas.EstateResult)
def run_estate_calculation(estate_data: schemas.EstateInput):
    """Faraid shares per asset plus per-heir totals across the estate."""
    try:
        return estate.calculate_estate(estate_data, settings.default_owner_gender)
    except ValueError as exc:
        logger.warning("Estate calculation rejected: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
