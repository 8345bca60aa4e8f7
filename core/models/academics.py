# =============================================================================
# core/models/academics.py - Academic Selection Schemas
# =============================================================================
# The course catalog is partitioned by (year, branch, semester). These codes
# appear in URLs (/{year}/{branch}/{semester}), in spreadsheet rows and on
# user profiles.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class Year(str, Enum):
    """Year of study."""
    FY = "fy"
    SY = "sy"
    TY = "ty"
    LY = "ly"


class Branch(str, Enum):
    """Engineering branch."""
    COMPS = "comps"
    MECH = "mech"
    EXCP = "excp"
    IT = "it"
    EXTC = "extc"
    RAI = "rai"
    CCE = "cce"
    CSBS = "csbs"
    AIDS = "aids"


class Semester(str, Enum):
    """Half of the academic year."""
    ODD = "odd"
    EVEN = "even"


YEAR_LABELS = {
    Year.FY: "First Year",
    Year.SY: "Second Year",
    Year.TY: "Third Year",
    Year.LY: "Fourth Year",
}

BRANCH_LABELS = {
    Branch.COMPS: "Computer Science",
    Branch.MECH: "Mechanical Engineering",
    Branch.EXCP: "Electronics & Computer Engineering",
    Branch.IT: "Information Technology",
    Branch.EXTC: "Electronics & Telecommunication Engineering",
    Branch.RAI: "Robotics & Automation Engineering",
    Branch.CCE: "Computer and Communication Engineering",
    Branch.CSBS: "Computer Science and Business Systems",
    Branch.AIDS: "Artificial Intelligence and Data Science",
}

SEMESTER_LABELS = {
    Semester.ODD: "Odd Semester",
    Semester.EVEN: "Even Semester",
}


class Option(BaseModel):
    """One entry of a select list."""
    value: str
    label: str


class AcademicOptions(BaseModel):
    """All selectable codes with display labels."""
    years: list[Option]
    branches: list[Option]
    semesters: list[Option]


class AcademicSelection(BaseModel):
    """
    A user's chosen catalog partition.

    Example:
        {"year": "fy", "branch": "comps", "semester": "odd"}
    """
    year: str = Field(..., min_length=1, description="Year code (fy, sy, ty, ly)")
    branch: str = Field(..., min_length=1, description="Branch code (comps, it, ...)")
    semester: str = Field(..., min_length=1, description="Semester code (odd, even)")


class AcademicSelectionResponse(BaseModel):
    """Selection plus the course route it resolves to."""
    year: str | None = None
    branch: str | None = None
    semester: str | None = None
    path: str | None = Field(
        default=None,
        description="Course route, e.g. /fy/comps/odd (null if nothing selected)"
    )
