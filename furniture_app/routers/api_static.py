from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..mapper import map_to_category_read, map_to_city_read
from ..models.static_data import Category, City
from ..schemas import CategoryRead, CityRead

router = APIRouter(prefix="/api", tags=["static data"])


@router.get("/categories", response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    rows = db.execute(select(Category).order_by(Category.name)).scalars().all()
    return [map_to_category_read(c) for c in rows]


@router.get("/cities", response_model=List[CityRead])
def list_cities(db: Session = Depends(get_db)):
    rows = db.execute(select(City).order_by(City.name)).scalars().all()
    return [map_to_city_read(c) for c in rows]
