from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union
from enum import Enum


class AuthType(str, Enum):
    KEY = "KEY"


class FieldType(str, Enum):
    TEXT = "TEXT"
    URL = "URL"
    NUMBER = "NUMBER"


class FieldConcept(str, Enum):
    DIMENSION = "DIMENSION"
    METRIC = "METRIC"


class SetCredentialsErrorCode(str, Enum):
    NONE = "NONE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

class AuthTypeResponse(BaseModel):
    """Authentication type declared by the connector"""
    type: AuthType
    help_url: Optional[str] = Field(None, alias="helpUrl", description="Connector auth help page")

    class Config:
        populate_by_name = True


class KeyCredentials(BaseModel):
    """Credential submission with a single opaque key"""
    key: str = Field(..., description="GitHub API key, stored verbatim")


class SetCredentialsResponse(BaseModel):
    error_code: SetCredentialsErrorCode = Field(..., alias="errorCode")

    class Config:
        populate_by_name = True


class AuthValidResponse(BaseModel):
    valid: bool


# ---------------------------------------------------------------------------
# User-facing configuration
# ---------------------------------------------------------------------------

class ConfigEntryType(str, Enum):
    INFO = "INFO"
    TEXTINPUT = "TEXTINPUT"


class ConfigEntry(BaseModel):
    """Single entry of the user-facing configuration form"""
    type: ConfigEntryType
    name: str = Field(..., description="Entry identifier")
    display_name: Optional[str] = Field(None, alias="displayName")
    text: Optional[str] = None
    help_text: Optional[str] = Field(None, alias="helpText")
    placeholder: Optional[str] = None

    class Config:
        populate_by_name = True


class ConfigResponse(BaseModel):
    config_params: List[ConfigEntry] = Field(..., alias="configParams")
    date_range_required: bool = Field(False, alias="dateRangeRequired")

    class Config:
        populate_by_name = True


# ---------------------------------------------------------------------------
# Schema and data
# ---------------------------------------------------------------------------

class FieldSchema(BaseModel):
    """A named, typed column of the reporting schema"""
    name: str
    data_type: FieldType = Field(..., alias="dataType")
    concept: FieldConcept

    class Config:
        populate_by_name = True


class RequestedField(BaseModel):
    name: str


class GetSchemaRequest(BaseModel):
    fields: Optional[List[RequestedField]] = Field(
        None,
        description="Restrict the schema to these fields (default: all fields)"
    )
    config_params: Optional[Dict[str, Any]] = Field(None, alias="configParams")

    class Config:
        populate_by_name = True


class GetSchemaResponse(BaseModel):
    schema_fields: List[FieldSchema] = Field(..., alias="schema")

    class Config:
        populate_by_name = True


class GetDataRequest(BaseModel):
    """Data request: requested fields plus the user's configuration values"""
    fields: List[RequestedField] = Field(..., description="Requested fields, in output order")
    config_params: Optional[Dict[str, Any]] = Field(None, alias="configParams")

    class Config:
        populate_by_name = True

    @property
    def field_ids(self) -> List[str]:
        return [field.name for field in self.fields]


class DataRow(BaseModel):
    values: List[Union[str, int, float, None]]


class GetDataResponse(BaseModel):
    schema_fields: List[FieldSchema] = Field(..., alias="schema")
    rows: List[DataRow]

    class Config:
        populate_by_name = True


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
