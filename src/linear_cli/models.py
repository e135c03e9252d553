"""Typed views of Linear GraphQL responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class LinearModel(BaseModel):
    """Base model accepting both the API's camelCase keys and field names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Connection(LinearModel, Generic[T]):
    """A list result; Linear wraps every collection under ``nodes``."""

    nodes: list[T] = Field(default_factory=list)


class Viewer(LinearModel):
    id: str
    name: str
    email: str


class IssueState(LinearModel):
    name: str


class IssueAssignee(LinearModel):
    name: str


class IssueTeam(LinearModel):
    id: str | None = None
    key: str
    name: str


class Issue(LinearModel):
    """Row shown by ``issue list``."""

    id: str
    identifier: str
    title: str
    state: IssueState | None = None
    assignee: IssueAssignee | None = None
    priority: int = 0


class IssueDetail(Issue):
    description: str | None = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    team: IssueTeam
    url: str | None = None


class CreatedIssue(LinearModel):
    id: str
    identifier: str
    title: str
    url: str | None = None


class Team(LinearModel):
    id: str
    key: str
    name: str
    description: str | None = None


class Project(LinearModel):
    id: str
    name: str
    state: str
    progress: float = 0.0
    start_date: str | None = Field(default=None, alias="startDate")
    target_date: str | None = Field(default=None, alias="targetDate")


class ProjectDetail(Project):
    description: str | None = None


class CreatedProject(LinearModel):
    id: str
    name: str
    url: str | None = None


class Cycle(LinearModel):
    id: str
    number: int
    name: str | None = None
    starts_at: str = Field(alias="startsAt")
    ends_at: str = Field(alias="endsAt")
    progress: float = 0.0


class CycleDetail(Cycle):
    description: str | None = None


class Label(LinearModel):
    id: str
    name: str
    color: str


class CommentUser(LinearModel):
    name: str


class Comment(LinearModel):
    id: str
    body: str
    created_at: str = Field(alias="createdAt")
    user: CommentUser | None = None


class Document(LinearModel):
    id: str
    title: str
    updated_at: str = Field(alias="updatedAt")


class DocumentDetail(LinearModel):
    id: str
    title: str
    content: str | None = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class CreatedDocument(LinearModel):
    id: str
    title: str


class WorkflowState(LinearModel):
    id: str
    name: str
    type: str
    color: str
    position: float


class SearchResult(LinearModel):
    id: str
    identifier: str
    title: str
    state: IssueState | None = None


class MutationPayload(LinearModel):
    """Every Linear mutation answers with at least a ``success`` flag."""

    success: bool = False
