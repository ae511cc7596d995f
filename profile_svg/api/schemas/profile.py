from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProfileSnapshot(FrozenModel):
    """Identity block shown in the header and the followers card."""

    username: str
    display_name: str
    bio: str
    follower_count: int = Field(ge=0)
    is_own_profile: bool


class RepositoryRecord(FrozenModel):
    """One repository from a listing page."""

    name: str
    is_private: bool
    pushed_at: datetime | None = None
    owner: str = ""


class LanguageShare(FrozenModel):
    """Share of sampled bytes written in one language, in percent."""

    name: str
    percentage: float = Field(ge=0, le=100)


class ContributionSummary(FrozenModel):
    total: int = Field(default=0, ge=0)
    active_days: int = Field(default=0, ge=0)
    current_streak: int = Field(default=0, ge=0)


class ActivityEvent(FrozenModel):
    """Recent public event row; `date` is a `YYYY-MM-DD` string."""

    repo_name: str
    event_type: str
    date: str


class SkillCategory(FrozenModel):
    title: str
    items: list[str]


class ContactEntry(FrozenModel):
    label: str
    value: str


class ProfileContent(FrozenModel):
    """Static presentation data that is configured, not fetched."""

    skills: list[SkillCategory]
    contacts: list[ContactEntry]
    about: list[str]


class RenderModel(FrozenModel):
    """Everything the renderer needs to produce one SVG document.

    `private_repo_count` and `recent_private_repos` are `None` when the
    requested profile is not the token owner's, which renders as unavailable.
    """

    profile: ProfileSnapshot
    recent_followers: list[str]
    public_repo_count: int = Field(ge=0)
    private_repo_count: int | None = None
    recent_public_repos: list[str]
    recent_private_repos: list[str] | None = None
    languages: list[LanguageShare]
    contributions: ContributionSummary
    activity: list[ActivityEvent]
    content: ProfileContent
