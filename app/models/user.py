"""
User Model with role-based access.
Admins may exist without a company; managers and users belong to one.
"""
import enum
import uuid

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid, Enum
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.company import utcnow


class UserRole(str, enum.Enum):
    """
    User roles with hierarchical permissions.

    - ADMIN: Platform-wide access across every company
    - MANAGER: Manages users, teams, developers and reports of their company
    - USER: Read access within their company
    """
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)

    role = Column(
        Enum(
            UserRole,
            values_callable=lambda roles: [r.value for r in roles],
            native_enum=False,
            length=50,
            create_constraint=True,
            name="user_role",
        ),
        default=UserRole.USER,
        nullable=False,
    )

    company_id = Column(Uuid(as_uuid=True), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    needs_password_change = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    company = relationship("Company", back_populates="users")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_manager(self) -> bool:
        """Check if user can manage company data (manager or admin)."""
        return self.role in [UserRole.ADMIN, UserRole.MANAGER]
