from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db

router = APIRouter(prefix="/catalog", tags=["catalog"])

# Seeded on first run; more can be added from the settings page
DEFAULT_STONE_TYPES = ["Mermer", "Granit", "Traverten", "Kuvars"]


def _upsert(db: Session, model, name: str, **fields):
    """Create a catalog entry, or reactivate a deactivated one with the same name."""
    entry = db.query(model).filter(model.name == name).first()
    if entry and entry.is_active:
        raise HTTPException(status_code=409, detail=f"'{name}' already exists")
    if entry:
        entry.is_active = True
        for field, value in fields.items():
            setattr(entry, field, value)
    else:
        entry = model(name=name, **fields)
        db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def _deactivate(db: Session, model, entry_id: int, label: str):
    """Soft delete: stored order rows keep pointing at the entry."""
    entry = db.query(model).filter(model.id == entry_id).first()
    if not entry:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    entry.is_active = False
    db.commit()
    return {"deleted": True, "id": entry_id}


# --- Stone types ---

@router.get("/stone-types/", response_model=List[schemas.StoneType])
def list_stone_types(db: Session = Depends(get_db)):
    return (
        db.query(models.StoneType)
        .filter(models.StoneType.is_active == True)  # noqa: E712
        .order_by(models.StoneType.name)
        .all()
    )

@router.post("/stone-types/", response_model=schemas.StoneType)
def create_stone_type(payload: schemas.StoneTypeCreate, db: Session = Depends(get_db)):
    return _upsert(db, models.StoneType, payload.name.strip())

@router.delete("/stone-types/{stone_type_id}")
def delete_stone_type(stone_type_id: int, db: Session = Depends(get_db)):
    return _deactivate(db, models.StoneType, stone_type_id, "Stone type")


# --- Stone features ---

@router.get("/stone-features/", response_model=List[schemas.StoneFeature])
def list_stone_features(db: Session = Depends(get_db)):
    return (
        db.query(models.StoneFeature)
        .filter(models.StoneFeature.is_active == True)  # noqa: E712
        .order_by(models.StoneFeature.name)
        .all()
    )

@router.post("/stone-features/", response_model=schemas.StoneFeature)
def create_stone_feature(payload: schemas.StoneFeatureCreate, db: Session = Depends(get_db)):
    return _upsert(db, models.StoneFeature, payload.name.strip(), default_price=payload.default_price)

@router.delete("/stone-features/{feature_id}")
def delete_stone_feature(feature_id: int, db: Session = Depends(get_db)):
    return _deactivate(db, models.StoneFeature, feature_id, "Stone feature")
