"""
Pydantic models for the compose submission.

Responsibilities:
- Define the six text fields of the card
- Default every missing field to an empty string
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class CardFields(BaseModel):
    """Text fields submitted alongside the photo."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    agent_number: str = Field("", alias="agentNumber")
    city: str = ""
    eye_color: str = Field("", alias="eyeColor")
    cover: str = ""
    recruitment_date: str = Field("", alias="recruitmentDate")

    def as_layout_fields(self) -> Dict[str, str]:
        """Values keyed by the form/layout field names."""
        return self.model_dump(by_alias=True)
