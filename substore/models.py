from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

SOURCE_LOCAL = "local"
SOURCE_REMOTE = "remote"

class SubscriptionFields(BaseModel):
    # Unknown keys (per-client options, future fields) are kept as-is.
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    display_name: Optional[str] = Field(default=None, alias="displayName")
    source: Optional[str] = None
    url: Optional[str] = None
    content: Optional[str] = None
    ua: Optional[str] = None
    icon: Optional[str] = None
    is_icon_color: Optional[bool] = Field(default=None, alias="isIconColor")
    process: Any = None
    tag: Any = None
    sub_userinfo: Optional[str] = Field(default=None, alias="subUserinfo")

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, keyed by their wire names."""
        out = self.model_dump(by_alias=True, exclude_unset=True)
        out.update(self.model_extra or {})
        return out

class SubscriptionIn(SubscriptionFields):
    name: str = Field(min_length=1)
    source: str = SOURCE_REMOTE

    def to_record(self) -> Dict[str, Any]:
        record = {"name": self.name, "source": self.source}
        record.update(self.changes())
        return record

class SubscriptionPatch(SubscriptionFields):
    name: Optional[str] = Field(default=None, min_length=1)

    def changes(self) -> Dict[str, Any]:
        out = super().changes()
        if out.get("name") is None:
            out.pop("name", None)
        return out

class FlowUsage(BaseModel):
    upload: int
    download: int

class FlowInfo(BaseModel):
    expires: Optional[int] = None
    total: int
    usage: FlowUsage

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
