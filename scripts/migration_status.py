import sys
import os

# Ensure we can import app modules
sys.path.append(os.getcwd())

from app.database import engine
from app.migrations import migration_status


def print_status():
    statuses = migration_status(engine)
    engine.dispose()

    print("--- Migration status ---")
    print(f"{'ID':<32} {'STATUS':<10} {'APPLIED AT':<26} DESCRIPTION")
    for status in statuses:
        label = "applied" if status.applied else "pending"
        applied_at = status.applied_at.strftime("%Y-%m-%d %H:%M:%S") if status.applied_at else "-"
        print(f"{status.id:<32} {label:<10} {applied_at:<26} {status.description}")

    applied = sum(1 for s in statuses if s.applied)
    print(f"\nTotal: {len(statuses)} | Applied: {applied} | Pending: {len(statuses) - applied}")


if __name__ == "__main__":
    print_status()
