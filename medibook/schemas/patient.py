from pydantic import EmailStr, Field

from .common import CamelModel


class PatientRegister(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    gender: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


class PatientResponse(CamelModel):
    id: int
    name: str
    email: EmailStr
    age: int
    gender: str
    phone: str
    address: str


class PatientRegisterResponse(CamelModel):
    message: str
    patient: PatientResponse
