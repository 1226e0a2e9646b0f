from sqlalchemy.orm import Session
from typing import List, Optional
import json
from app.db.models.site import Site
from app.db.schemas.site import SiteCreate
from app.services.geofence import LatLng, generate_corridor_boundary

def get_site(db: Session, site_id: int) -> Optional[Site]:
    return db.query(Site).filter(Site.id == site_id).first()

def get_sites(db: Session, skip: int = 0, limit: int = 100) -> List[Site]:
    return db.query(Site).order_by(Site.id).offset(skip).limit(limit).all()

def create_site(db: Session, site: SiteCreate) -> Site:
    boundary = generate_corridor_boundary(
        LatLng(site.lat_from, site.lng_from),
        LatLng(site.lat_to, site.lng_to),
        site.buffer_meters,
    )
    db_site = Site(**site.model_dump(), boundary_geojson=json.dumps(boundary))
    db.add(db_site)
    db.commit()
    db.refresh(db_site)
    return db_site

def delete_site(db: Session, site_id: int) -> bool:
    db_site = get_site(db, site_id)
    if db_site:
        db.delete(db_site)
        db.commit()
        return True
    return False
