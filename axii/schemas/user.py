from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr

class UserCreate(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: Optional[str] = None

class UserAuth(BaseModel):
    email: str = ""
    password: str = ""

class UserRead(BaseModel):
    id: int
    name: str
    email: EmailStr
    photo: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    token_type: str = "bearer"
    user: UserRead

class UserResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserRead

class ProfileUpdate(BaseModel):
    name: str = ""
    email: str = ""
    photo: Optional[str] = None  # URL; vazio remove a foto

class PasswordUpdate(BaseModel):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""

class PasswordCheck(BaseModel):
    password: str = ""

class PasswordStrength(BaseModel):
    score: int
    level: str  # weak, medium, strong
    feedback: list[str]

class PasswordStrengthResponse(BaseModel):
    success: bool = True
    strength: PasswordStrength

class AccountDelete(BaseModel):
    confirmation: str = ""

class Preferences(BaseModel):
    dark_mode: bool
    email_notifications: bool
    device_alerts: bool
    schedule_reminders: bool
    system_updates: bool
    public_profile: bool
    show_online_status: bool
    share_activity: bool

    class Config:
        from_attributes = True

class PreferencesUpdate(BaseModel):
    dark_mode: Optional[bool] = None
    email_notifications: Optional[bool] = None
    device_alerts: Optional[bool] = None
    schedule_reminders: Optional[bool] = None
    system_updates: Optional[bool] = None
    public_profile: Optional[bool] = None
    show_online_status: Optional[bool] = None
    share_activity: Optional[bool] = None

class PreferencesResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    preferences: Preferences

class MessageResponse(BaseModel):
    success: bool = True
    message: str
