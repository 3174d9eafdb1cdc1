from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=120)
    photo_url: Optional[str] = None
    position: Optional[str] = None
    jersey_number: Optional[int] = Field(default=None, ge=0, le=99)
    email: Optional[str] = None
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    instagram_handle: Optional[str] = None
    twitter_handle: Optional[str] = None
    date_of_birth: Optional[str] = None
    stats: Optional[Dict[str, Any]] = None
    skill_level: Optional[str] = None
    years_experience: Optional[int] = Field(default=None, ge=0)
    shoots: Optional[str] = None
    height_inches: Optional[float] = Field(default=None, ge=0)
    weight_lbs: Optional[float] = Field(default=None, ge=0)
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relationship: Optional[str] = None
    parent_name: Optional[str] = None
    parent_email: Optional[str] = None
    parent_phone: Optional[str] = None


class InviteCreate(BaseModel):
    player_id: str = Field(min_length=1)
