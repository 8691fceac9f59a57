"""
Pydantic models for greeting data.

``GreetingCreate`` is the raw request body of ``POST /api/create``.  All
of its fields are optional at the schema level; presence and bounds are
checked by ``GreetingService.validate`` which produces a ``NewGreeting``
with trimmed values.  Optional display fields are grouped in
``GreetingExtras`` so that the rest of the code never has to test for
their presence.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field


MAX_NAME_LENGTH = 100
MAX_MESSAGE_LENGTH = 500
MAX_SUBTITLE_LENGTH = 200
MAX_QUOTE_LENGTH = 500
MAX_MEMORY_LINES = 20
MAX_MEMORY_LINE_LENGTH = 200
MAX_DAY_INDEX = 7


class GreetingCreate(BaseModel):
    """Request body for creating a greeting."""

    sender: Optional[str] = Field(None, examples=["Alex"])
    receiver: Optional[str] = Field(None, examples=["Sam"])
    message: Optional[str] = Field(None, examples=["Happy Valentine's Day!"])
    day_index: Optional[int] = Field(None, examples=[0], description="Day theme, 0 to 7")
    subtitle: Optional[str] = Field(None, examples=["For the one who makes every day brighter"])
    quote: Optional[str] = Field(None, examples=["You are my today and all of my tomorrows."])
    # Either a list of lines or a single newline-separated string.
    memories: Optional[Union[List[str], str]] = Field(
        None, examples=[["Our first coffee", "The rainy walk home"]]
    )


class GreetingExtras(BaseModel):
    """Optional display fields of a greeting."""

    subtitle: str = ""
    quote: str = ""
    memories: List[str] = Field(default_factory=list)


class NewGreeting(BaseModel):
    """A validated greeting ready to be stored."""

    sender: str
    receiver: str
    message: str = ""
    day_index: int = 0
    extras: GreetingExtras = Field(default_factory=GreetingExtras)


class GreetingRead(BaseModel):
    """A stored greeting as returned by ``GET /api/get``."""

    id: str
    sender: str
    receiver: str
    message: str
    day_index: int
    subtitle: str = ""
    quote: str = ""
    memories: List[str] = Field(default_factory=list)
    created_at: str

    model_config = {
        "from_attributes": True,
    }

    @property
    def extras(self) -> GreetingExtras:
        return GreetingExtras(subtitle=self.subtitle, quote=self.quote, memories=list(self.memories))


class GreetingCreated(BaseModel):
    """Response body of a successful create."""

    success: bool = True
    id: str
    url: str


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing API response."""

    error: str = Field(..., examples=["validation_error"])
    message: str = Field(..., examples=["Sender name must be 100 characters or less"])
