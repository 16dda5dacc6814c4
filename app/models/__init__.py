# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import company, user, team, developer, performance_report, migration

# Explicit class exports for cleaner imports
from .company import Company
from .user import User, UserRole
from .team import Team
from .developer import Developer
from .performance_report import PerformanceReport
from .migration import SchemaMigration

__all__ = [
    "Company",
    "User",
    "UserRole",
    "Team",
    "Developer",
    "PerformanceReport",
    "SchemaMigration",
]
