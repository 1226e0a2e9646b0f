"""
Database migration to enforce at most one open alert per (shift, type)
"""
from sqlalchemy import text
from app.database import engine

def upgrade():
    """Close duplicate open alerts, then add the partial unique index"""
    with engine.connect() as conn:
        # Keep the oldest open alert of each (shift, type); resolve the rest
        conn.execute(text("""
            UPDATE alerts
            SET resolved_at = CURRENT_TIMESTAMP
            WHERE resolved_at IS NULL
              AND id NOT IN (
                  SELECT MIN(id) FROM alerts
                  WHERE resolved_at IS NULL
                  GROUP BY shift_id, type
              )
        """))

        conn.execute(text("""
            CREATE UNIQUE INDEX IF NOT EXISTS alerts_open_shift_type_uq
            ON alerts (shift_id, type)
            WHERE resolved_at IS NULL
        """))

        conn.commit()
        print("✅ Added open-alert unique index to alerts table")

def downgrade():
    """Drop the open-alert unique index"""
    with engine.connect() as conn:
        conn.execute(text("DROP INDEX IF EXISTS alerts_open_shift_type_uq"))
        conn.commit()
        print("✅ Removed open-alert unique index from alerts table")

if __name__ == "__main__":
    print("Running database migration for open-alert uniqueness...")
    upgrade()
    print("Migration completed successfully!")
