"""
Migration script to rewrite legacy 'pending' class statuses as 'scheduled'.

Reads already treat 'pending' as 'scheduled'; this makes the stored data agree
so status filters can match on a single value.
"""

import sqlite3
import os


def run_migration():
    db_path = os.getenv("DATABASE_URL", "sqlite:///./backoffice.db").replace("sqlite:///", "")
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='classes'")
        if not cursor.fetchone():
            print("classes table does not exist. Skipping migration.")
            return

        cursor.execute("UPDATE classes SET status = 'scheduled' WHERE status = 'pending' OR status IS NULL OR status = ''")
        updated = cursor.rowcount
        conn.commit()
        print(f"✓ Migration completed successfully! {updated} class(es) normalized.")

    except sqlite3.Error as e:
        print(f"Error during migration: {e}")
        if conn:
            conn.rollback()
    finally:
        if conn:
            conn.close()

if __name__ == "__main__":
    run_migration()
