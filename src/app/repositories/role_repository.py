from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import Permission, Role


class IRoleRepository(ABC):
    """Role repository interface - application layer"""

    @abstractmethod
    async def first_or_create(self, name: str, guard_name: str) -> Role:
        """Get role (name, guard) or create it"""
        pass

    @abstractmethod
    async def get_by_name(self, name: str, guard_name: str) -> Optional[Role]:
        """Get role by name within a guard"""
        pass

    @abstractmethod
    async def get_by_names(self, names: List[str], guard_name: str) -> List[Role]:
        """Get roles by names within a guard"""
        pass

    @abstractmethod
    async def sync_permissions(self, role: Role, permissions: List[Permission]) -> None:
        """Replace the role's permission set with exactly `permissions`"""
        pass

    @abstractmethod
    async def get_permission_map(self, guard_name: str) -> Dict[str, List[str]]:
        """Map role name -> permission names for a guard"""
        pass

    @abstractmethod
    async def get_roles_for_user(self, user_id: UUID) -> List[Role]:
        """Roles held by a user"""
        pass

    @abstractmethod
    async def assign_to_user(self, user_id: UUID, role: Role) -> bool:
        """Grant role to user; returns False if already held"""
        pass

    @abstractmethod
    async def sync_user_roles(self, user_id: UUID, roles: List[Role]) -> None:
        """Replace the user's role set with exactly `roles`"""
        pass
