from pydantic import BaseModel, ConfigDict, Field


class CreateAppointmentSchema(BaseModel):
    service_id: str | None = Field(default=None, alias="serviceId")
    date: str
    time: str
    notes: str | None = None


class UpdateAppointmentSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service_id: str | None = Field(default=None, alias="serviceId")
    date: str | None = None
    time: str | None = None
    notes: str | None = None


class LoginSchema(BaseModel):
    email: str
    password: str


class RegisterSchema(BaseModel):
    name: str
    email: str
    password: str


class UpdateProfileSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
