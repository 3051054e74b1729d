"""Pydantic request/response schemas for API."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TaskStatusName = Literal["Not Started", "In Progress", "Completed", "Blocked"]


class TaskCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatusName = "Not Started"
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    dependencies: Optional[List[str]] = None


class TaskUpdateRequest(BaseModel):
    """Partial update; only fields that were sent are applied."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatusName] = None
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    dependencies: Optional[List[str]] = None


class SettingsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")
    max_depth: Optional[int] = Field(default=None, ge=1, alias="maxDepth")
    min_size: Optional[float] = Field(default=None, gt=0, alias="minSize")
