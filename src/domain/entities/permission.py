"""
Permission and Role Entities

Authorization data stored in every tenant database, scoped by guard.
"""

from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Permission(SQLModel, table=True):
    """Named ability; unique per guard"""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    guard_name: str = Field(max_length=64)

    __table_args__ = (
        UniqueConstraint("name", "guard_name", name="uq_permission_name_guard"),
    )


class Role(SQLModel, table=True):
    """Named set of permissions; unique per guard"""

    __tablename__ = "roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    guard_name: str = Field(max_length=64)

    __table_args__ = (UniqueConstraint("name", "guard_name", name="uq_role_name_guard"),)


class RoleHasPermission(SQLModel, table=True):
    """Role <-> Permission link"""

    __tablename__ = "role_has_permissions"

    role_id: UUID = Field(foreign_key="roles.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)


class UserHasRole(SQLModel, table=True):
    """TenantUser <-> Role link"""

    __tablename__ = "user_has_roles"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    role_id: UUID = Field(foreign_key="roles.id", primary_key=True)
