"""
Permission registry of the tenant admin panel.

Every permission-bearing resource, page and widget is registered here;
seeding enumerates the registry to build a tenant's permission set.

Naming:
- resource: `{prefix}_{resource}` for each prefix (view_any_user, ...)
- page:     `page_{Name}`
- widget:   `widget_{Name}`
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from src.domain.exceptions import PermissionRegistryError

DEFAULT_RESOURCE_PREFIXES = (
    "view",
    "view_any",
    "create",
    "update",
    "restore",
    "restore_any",
    "replicate",
    "reorder",
    "delete",
    "delete_any",
    "force_delete",
    "force_delete_any",
)

_PERMISSION_NAME = re.compile(r"^[A-Za-z0-9_:.-]+$")


def _check(name: str) -> str:
    if not isinstance(name, str) or not _PERMISSION_NAME.match(name):
        raise PermissionRegistryError(f"Invalid permission name: {name!r}")
    return name


@dataclass
class PermissionRegistry:
    resources: Dict[str, Optional[List[str]]] = field(default_factory=dict)
    pages: List[str] = field(default_factory=list)
    widgets: List[str] = field(default_factory=list)
    custom_permissions: List[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config) -> "PermissionRegistry":
        return cls(
            resources=dict(config.SHIELD_RESOURCES or {}),
            pages=list(config.SHIELD_PAGES or []),
            widgets=list(config.SHIELD_WIDGETS or []),
            custom_permissions=list(config.SHIELD_CUSTOM_PERMISSIONS or []),
        )

    def register_resource(self, name: str, prefixes: Optional[Iterable[str]] = None) -> None:
        self.resources[name] = list(prefixes) if prefixes is not None else None

    def register_page(self, name: str) -> None:
        if name not in self.pages:
            self.pages.append(name)

    def register_widget(self, name: str) -> None:
        if name not in self.widgets:
            self.widgets.append(name)

    def get_resources(self) -> Dict[str, List[str]]:
        """Resource name -> permission keys"""
        return {
            resource: [
                _check(f"{prefix}_{resource}")
                for prefix in (prefixes if prefixes is not None else DEFAULT_RESOURCE_PREFIXES)
            ]
            for resource, prefixes in self.resources.items()
        }

    def get_pages(self) -> Dict[str, str]:
        """Page name -> permission key"""
        return {page: _check(f"page_{page}") for page in self.pages}

    def get_widgets(self) -> Dict[str, str]:
        """Widget name -> permission key"""
        return {widget: _check(f"widget_{widget}") for widget in self.widgets}

    def get_custom_permissions(self) -> List[str]:
        return [_check(name) for name in self.custom_permissions]

    def all_permission_names(self) -> List[str]:
        """Every permission key, de-duplicated, in registration order"""
        names: List[str] = []
        for keys in self.get_resources().values():
            names.extend(keys)
        names.extend(self.get_pages().values())
        names.extend(self.get_widgets().values())
        names.extend(self.get_custom_permissions())
        return list(dict.fromkeys(names))
