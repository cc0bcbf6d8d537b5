from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

Password = Annotated[str, Field(min_length=6, max_length=128)]
TargetLanguage = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=60)]


class LoginRequest(BaseModel):
    email: EmailStr
    password: Password


class RegisterRequest(BaseModel):
    email: EmailStr
    password: Password


class UpdateMeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_language: TargetLanguage = Field(alias="targetLanguage")


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    email: str
    target_language: str = Field(serialization_alias="targetLanguage")


class OkResponse(BaseModel):
    ok: bool = True
