"""Business Info Schema - optional info.json next to versioned business content.

Only currentVersion is read; other keys in the file are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class BusinessInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_version: str = Field("", alias="currentVersion")
