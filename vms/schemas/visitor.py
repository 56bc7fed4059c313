from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from typing import Optional


class VisitorCreate(BaseModel):
    """
    Identity fields accepted at registration / walk-in.
    Accepts the field names the reception front-end sends (visitorName,
    hostName, idProof, ...) as well as the snake_case ones.
    """
    name: str = Field(min_length=1, max_length=200,
                      validation_alias=AliasChoices("name", "visitorName", "fullName"))
    email: Optional[str] = Field(None, max_length=254)
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=200,
                                   validation_alias=AliasChoices("company", "companyName"))
    host_name: Optional[str] = Field(None, max_length=200,
                                     validation_alias=AliasChoices("host_name", "hostName", "host"))
    purpose: Optional[str] = None
    visitor_type: Optional[str] = Field(None, max_length=50,
                                        validation_alias=AliasChoices("visitor_type", "visitorType"))
    id_proof: Optional[str] = Field(None, max_length=100,
                                    validation_alias=AliasChoices("id_proof", "idProof"))
    expected_duration: Optional[str] = Field(None, max_length=50,
                                             validation_alias=AliasChoices("expected_duration", "duration"))

    class Config:
        str_strip_whitespace = True
        extra = "ignore"


class VisitorOut(BaseModel):
    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    company: Optional[str]
    host_name: Optional[str]
    purpose: Optional[str]
    visitor_type: Optional[str]
    id_proof: Optional[str]
    expected_duration: Optional[str]
    photo_path: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
