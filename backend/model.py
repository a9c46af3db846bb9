# backend/model.py
from pydantic import BaseModel
from typing import Optional, Union, List, Dict, Any


class EditRequest(BaseModel):
    prompt: Optional[str] = None
    image: Optional[Union[str, List[str]]] = None  # data URIs or URLs


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    output_format: str = "jpg"


class ServiceResponse(BaseModel):
    success: bool
    output: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    success: bool = False


class EndpointInfo(BaseModel):
    message: str
    model: str
    description: str
    expectedInput: Dict[str, Any]
