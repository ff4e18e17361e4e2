"""Pet listing API routes.

Responsibilities:
- `/api/pets`: every pet in the store, ordered by id

Data source:
- the `pets` table created and seeded at startup (`petstore_api.seed`).
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Pet
from ..schemas import PetOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pets", response_model=list[PetOut])
def list_pets(db: Session = Depends(get_db)):
    """List all pets ordered by id.

    Args:
        db: SQLAlchemy session (injected).

    Returns:
        list[PetOut]: Every row of the `pets` table. On a database error the
        response is a 500 with `{"error": "Failed to fetch pets"}`.
    """
    try:
        pets = db.scalars(select(Pet).order_by(Pet.id)).all()
    except SQLAlchemyError:
        logger.exception("Error fetching pets")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch pets"})
    return [PetOut.model_validate(pet) for pet in pets]
