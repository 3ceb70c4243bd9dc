# addonmanager/packs/manifest.py
from __future__ import annotations
import re
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from addonmanager.packs.types import (
    DEFAULT_DESCRIPTION,
    DEFAULT_NAME,
    NIL_PACK_ID,
    PackCategory,
)
from addonmanager.packs.version import PackVersion, parsePackVersion

__all__ = [
    "ManifestHeader",
    "ManifestModule",
    "BedrockManifest",
    "MODULE_TYPE_CATEGORIES",
    "categoryFromModules",
    "coercePackId",
    "stripFormattingCodes",
]


MODULE_TYPE_CATEGORIES: dict[str, PackCategory] = {
    "resources": PackCategory.RESOURCE,
    "data": PackCategory.BEHAVIOR_DATA,
    "script": PackCategory.BEHAVIOR_SCRIPT,
    "javascript": PackCategory.BEHAVIOR_SCRIPT,
}

# Bedrock text formatting: section sign followed by one code character
_FORMATTING_CODE_RE = re.compile(r"§.", re.DOTALL)



def coercePackId(value: Any) -> UUID:
    """Any uuid that does not parse becomes NIL_PACK_ID instead of failing the manifest."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError:
            return NIL_PACK_ID
    return NIL_PACK_ID



def stripFormattingCodes(text: str) -> str:
    return _FORMATTING_CODE_RE.sub("", text)



class ManifestHeader(BaseModel):
    """The `header` object of a pack manifest. Unknown keys are ignored."""
    model_config = ConfigDict(extra="ignore")

    name: str = DEFAULT_NAME
    description: str = DEFAULT_DESCRIPTION
    uuid: UUID = NIL_PACK_ID
    version: PackVersion = ()

    @field_validator("name", mode="before")
    @classmethod
    def _defaultName(cls, value: Any) -> Any:
        return DEFAULT_NAME if value is None else value

    @field_validator("description", mode="before")
    @classmethod
    def _defaultDescription(cls, value: Any) -> Any:
        return DEFAULT_DESCRIPTION if value is None else value

    @field_validator("uuid", mode="before")
    @classmethod
    def _coerceUuid(cls, value: Any) -> UUID:
        return coercePackId(value)

    @field_validator("version", mode="before")
    @classmethod
    def _parseVersion(cls, value: Any) -> PackVersion:
        return parsePackVersion(value)



class ManifestModule(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str | None = None



class BedrockManifest(BaseModel):
    """
    Validated view over manifest.json.

    Only `header` is required; a manifest without it does not describe a pack.
    """
    model_config = ConfigDict(extra="ignore")

    header: ManifestHeader
    modules: list[ManifestModule] | None = Field(default=None)

    @property
    def category(self) -> PackCategory | None:
        return categoryFromModules(self.modules)



def categoryFromModules(modules: list[ManifestModule] | None) -> PackCategory | None:
    """
    The first module decides. No modules, or a first module without a type,
    leaves the category unresolved.
    """
    if not modules:
        return None
    moduleType = modules[0].type
    if moduleType is None:
        return None
    return MODULE_TYPE_CATEGORIES.get(moduleType.strip().lower(), PackCategory.UNKNOWN)
