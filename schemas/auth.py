from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    token_type: str


class TeacherLogin(BaseModel):
    password: str


class PasswordChangeSchema(BaseModel):
    current: str
    new: str
    confirm: str


class ResetSchema(BaseModel):
    confirm: str
