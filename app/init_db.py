# init_db.py
from app.database import engine, SessionLocal, Base
from app.db.models.user import User
from app.db.models.site import Site
from app.db.crud import site as site_crud
from app.db.crud import user as user_crud
from app.db.schemas.site import SiteCreate
from app.db.schemas.user import UserCreate

def seed():
    db = SessionLocal()
    try:
        # Seed users
        if not db.query(User).first():
            user_crud.create_user(db, UserCreate(
                name="Default Supervisor",
                email="supervisor@example.com",
                role="supervisor",
            ))
            user_crud.create_user(db, UserCreate(
                name="Default Guard",
                email="guard@example.com",
                role="guard",
                badge_id="G-0001",
            ))

        # Seed site
        if not db.query(Site).first():
            site_crud.create_site(db, SiteCreate(
                name="Default Site",
                address_from="Main Gate",
                address_to="Warehouse",
                lat_from=14.6,
                lng_from=121.0,
                lat_to=14.601,
                lng_to=121.002,
            ))
    finally:
        db.close()

def init():
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created")
    seed()
    print("✅ Seed data added")

if __name__ == "__main__":
    init()
