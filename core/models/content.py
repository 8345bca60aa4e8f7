# =============================================================================
# core/models/content.py - Course Content Schemas
# =============================================================================
# Subject -> Module (numbered) -> Topic -> Video/Note.
# Content is read-only here: it comes from the spreadsheet or a static
# JSON catalog.
# =============================================================================

from pydantic import BaseModel, Field


class Video(BaseModel):
    """A lecture video attached to a topic."""
    title: str
    url: str | None = None


class NotesLink(BaseModel):
    """A notes document link (module-level or topic-level)."""
    title: str
    url: str


class ImportantLink(BaseModel):
    """Subject-wide reference link (syllabus, PYQs, ...)."""
    title: str = "Untitled"
    url: str = "#"


class Topic(BaseModel):
    """One topic inside a module."""
    title: str
    description: str = ""
    videos: list[Video] = Field(default_factory=list)
    notes: list[NotesLink] = Field(default_factory=list)


class ModuleContent(BaseModel):
    """A numbered module of a subject."""
    number: int = Field(..., ge=1)
    notes_links: list[NotesLink] = Field(default_factory=list)
    topics: list[Topic] = Field(default_factory=list)


class Subject(BaseModel):
    """
    A subject in one year/branch/semester.

    Example:
        {
            "key": "am2",
            "name": "Applied Mathematics 2",
            "icon": "Brain",
            "color": "blue",
            "modules": {"1": {"number": 1, "notes_links": [], "topics": [...]}}
        }
    """
    key: str
    name: str
    icon: str = "BookOpen"
    color: str = "blue"
    modules: dict[int, ModuleContent] = Field(default_factory=dict)

    def sorted_modules(self) -> list[ModuleContent]:
        """Modules in numeric order."""
        return [self.modules[n] for n in sorted(self.modules)]


class SubjectSummary(BaseModel):
    """Subject listing entry without module bodies."""
    key: str
    name: str
    icon: str
    color: str
    module_numbers: list[int]
