from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.db.crud import site as site_crud
from app.db.schemas.site import SiteCreate, Site

router = APIRouter(
    prefix="/api/v1/sites",
    tags=["sites"]
)

@router.get("/", response_model=List[Site])
def get_all_sites(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Get all sites"""
    return site_crud.get_sites(db, skip=skip, limit=limit)

@router.post("/", response_model=Site, status_code=status.HTTP_201_CREATED)
def create_site(
    site: SiteCreate,
    db: Session = Depends(get_db)
):
    """Create a site; the boundary is a corridor around the two anchors"""
    return site_crud.create_site(db, site)

@router.get("/{site_id}", response_model=Site)
def get_site(
    site_id: int,
    db: Session = Depends(get_db)
):
    """Get a specific site"""
    db_site = site_crud.get_site(db, site_id)
    if not db_site:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Site not found"
        )
    return db_site

@router.delete("/{site_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_site(
    site_id: int,
    db: Session = Depends(get_db)
):
    """Delete a site"""
    if not site_crud.delete_site(db, site_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Site not found"
        )
