from abc import ABC, abstractmethod

from src.domain.entities import Permission


class IPermissionRepository(ABC):
    """Permission repository interface - application layer"""

    @abstractmethod
    async def first_or_create(self, name: str, guard_name: str) -> Permission:
        """Get permission (name, guard) or create it"""
        pass
