"""Project application commands."""

from pydantic import BaseModel

from src.modules.projects.domain.entities import ProjectDocumentation


class AddProjectDocumentationCommand(BaseModel):
    """Add a documentation release to a project."""

    project_slug: str
    documentation: ProjectDocumentation


class DeleteProjectDocumentationCommand(BaseModel):
    """Delete a documentation release from a project."""

    project_slug: str
    version: str
