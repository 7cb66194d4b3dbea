"""Application catalog models.

This module defines the Pydantic models representing catalog.toml, the
read-only list of applications and their per-manager package identifiers.
"""

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from packmate.models.manager import PackageManagerId


class CatalogApp(BaseModel):
    """A single installable application.

    Attributes:
        id: Stable application identifier (e.g., 'firefox').
        name: Display name shown in scripts and tables.
        description: Optional one-line description.
        category: Optional category label.
        targets: Package identifier per manager id. A missing or empty
            entry means the app is not offered on that manager.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: Annotated[str, Field(min_length=1, description="Application identifier")]
    name: Annotated[str, Field(min_length=1, description="Display name")]
    description: Annotated[str | None, Field(description="Short description")] = None
    category: Annotated[str | None, Field(description="Category label")] = None
    targets: Annotated[
        dict[str, str],
        Field(default_factory=dict, description="Package identifier per manager"),
    ]

    @field_validator("targets")
    @classmethod
    def validate_target_keys(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject targets keyed by an unknown package manager."""
        for key in v:
            try:
                PackageManagerId(key)
            except ValueError:
                msg = f"Unknown package manager in targets: {key!r}"
                raise ValueError(msg) from None
        return v

    def target_for(self, manager: PackageManagerId | str) -> str | None:
        """Return the package identifier for a manager, or None if not offered."""
        target = self.targets.get(PackageManagerId(manager).value)
        return target or None

    def is_available_for(self, manager: PackageManagerId | str) -> bool:
        """Check whether the app has a non-empty target for a manager."""
        return self.target_for(manager) is not None


class Catalog(BaseModel):
    """The complete application catalog."""

    model_config = ConfigDict(extra="forbid")

    apps: Annotated[
        list[CatalogApp],
        Field(default_factory=list, description="All catalog applications"),
    ]

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "Catalog":
        """Validate that application ids are unique."""
        seen: set[str] = set()
        duplicates: set[str] = set()
        for app in self.apps:
            if app.id in seen:
                duplicates.add(app.id)
            seen.add(app.id)
        if duplicates:
            msg = f"Duplicate application ids in catalog: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    def get(self, app_id: str) -> CatalogApp | None:
        """Find an application by id."""
        for app in self.apps:
            if app.id == app_id:
                return app
        return None

    def apps_for(self, manager: PackageManagerId | str) -> list[CatalogApp]:
        """Return all applications offered on a manager."""
        return [app for app in self.apps if app.is_available_for(manager)]

    def resolve(
        self,
        app_ids: list[str] | set[str] | tuple[str, ...],
        manager: PackageManagerId | str,
    ) -> list["ResolvedPackage"]:
        """Resolve selected app ids to package identifiers for a manager.

        Unknown ids and apps not offered on the manager are dropped. The
        result follows catalog order so generated scripts are stable
        regardless of selection order.

        Args:
            app_ids: Selected application identifiers.
            manager: Target package manager.

        Returns:
            ResolvedPackage for each selected app available on the manager.
        """
        selected = set(app_ids)
        resolved: list[ResolvedPackage] = []
        for app in self.apps:
            if app.id not in selected:
                continue
            target = app.target_for(manager)
            if target is not None:
                resolved.append(ResolvedPackage(app_id=app.id, name=app.name, package=target))
        return resolved


@dataclass(frozen=True, slots=True)
class ResolvedPackage:
    """An application resolved to a manager-specific package identifier.

    Attributes:
        app_id: Catalog application identifier.
        name: Display name used in script output.
        package: Opaque package identifier for the target manager.
    """

    app_id: str
    name: str
    package: str

    def __post_init__(self) -> None:
        """Validate resolved package data after initialization."""
        if not self.package:
            msg = "Package identifier cannot be empty"
            raise ValueError(msg)
