from pydantic import BaseModel, Field


class Mood(BaseModel):
    id: str
    name: str = Field(examples=["cozy"])
    description: str = Field(examples=["Comfortable and warm content"])
    category: str = Field(examples=["atmosphere"])
    emoji: str
    genres: list[str] = Field(default_factory=list, examples=[["Slice of Life", "Romance"]])


class MoodCatalog(BaseModel):
    moods: list[Mood] = Field(default_factory=list)
