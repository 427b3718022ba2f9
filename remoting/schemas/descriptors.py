"""
Pydantic models describing the arguments and results of remote methods.

ArgumentDescriptor and ReturnDescriptor are created once, when a method is
registered, and are frozen afterwards. Their `type` fields are type tags
resolved through the CoercionRegistry.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# Where the REST transport looks for an argument value
HttpSource = Literal["auto", "body", "query", "path"]


class ArgumentDescriptor(BaseModel):
    """
    Declared argument of a remote method.

    Fields:
        name: Argument name used on the wire (query key, body key, socket arg)
        type: Type tag selecting the converter (e.g. "geopoint", "number")
        required: Whether an absent/empty value fails the call
        item_type: Element type tag when `type` is "array"
        http_source: REST lookup strategy; "body" binds the whole request body
        description: Free-form documentation
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Argument name")
    type: str = Field("any", min_length=1, description="Declared type tag", examples=["geopoint", "number"])
    required: bool = Field(False, description="Reject absent or empty values")
    item_type: Optional[str] = Field(None, description="Element type tag for arrays")
    http_source: HttpSource = Field("auto", description="Where the REST transport reads the value")
    description: Optional[str] = Field(None, description="Human-readable description")


class ReturnDescriptor(BaseModel):
    """
    Declared result field of a remote method.

    The order of return descriptors determines which callback result lands
    in which field. `name` takes precedence over the positional `arg` tag.
    """
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(None, description="Result field name")
    arg: Optional[str] = Field(None, description="Positional tag used when name is not set")
    type: str = Field("any", min_length=1, description="Declared type tag")
    description: Optional[str] = Field(None, description="Human-readable description")

    @property
    def key(self) -> Optional[str]:
        return self.name or self.arg
