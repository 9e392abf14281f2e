import datetime as dt
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

Role = Literal["ngo", "volunteer"]

EventType = Literal[
    "beach-clean",
    "food-drive",
    "tree-plantation",
    "education",
    "health-camp",
    "animal-welfare",
    "other",
]

EventStatus = Literal["upcoming", "ongoing", "completed", "cancelled"]

RegistrationStatus = Literal["pending", "approved", "rejected", "attended", "no-show"]

# registrations that hold one of an event's spots
ACTIVE_REGISTRATION_STATUSES = ["pending", "approved"]

# largest integer BSON can store
MAX_INT64 = 2**63 - 1


class UserRegister(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=50)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6)
    role: Role
    phone: Optional[str] = None
    organizationName: Optional[str] = Field(None, max_length=100)
    organizationDescription: Optional[str] = Field(None, max_length=1000)
    skills: List[str] = Field(default_factory=list)
    availability: Optional[str] = None

    @model_validator(mode="after")
    def check_organization(self):
        if self.role == "ngo" and not self.organizationName:
            raise ValueError("Organization name is required for NGO accounts")
        return self


class UserLogin(BaseModel):
    email: str
    password: str


class Location(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(min_length=1)
    city: str = Field(min_length=1)


class EventCreate(BaseModel):
    """Fields an NGO may set on a new event. Owner and timestamps are set server-side."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=2000)
    eventType: EventType
    location: Location
    date: dt.date
    startTime: str = Field(min_length=1)
    endTime: str = Field(min_length=1)
    volunteersNeeded: int = Field(ge=1, le=MAX_INT64)
    requirements: Optional[str] = Field(None, max_length=500)
    status: EventStatus = "upcoming"


class EventUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    eventType: Optional[EventType] = None
    location: Optional[Location] = None
    date: Optional[dt.date] = None
    startTime: Optional[str] = Field(None, min_length=1)
    endTime: Optional[str] = Field(None, min_length=1)
    volunteersNeeded: Optional[int] = Field(None, ge=1, le=MAX_INT64)
    requirements: Optional[str] = Field(None, max_length=500)
    status: Optional[EventStatus] = None


class RegistrationCreate(BaseModel):
    eventId: str
    message: Optional[str] = Field(None, max_length=500)


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus
