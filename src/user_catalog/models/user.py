"""
User entity, request/response models and shape validation
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, NamedTuple, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

NAME_MAX_LENGTH = 100
ADDRESS_MAX_LENGTH = 500
AGE_MIN = 1
AGE_MAX = 99

# JSON keys used on the wire -> entity attribute names
WIRE_FIELD_NAMES = {"nome": "name", "idade": "age", "endereco": "address"}


@dataclass
class User:
    """A single row of the users table"""
    name: Optional[str] = None
    age: Optional[int] = None
    address: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        return cls(
            id=record["id"],
            name=record["name"],
            age=record["age"],
            address=record["address"],
        )


class FieldError(NamedTuple):
    field: str
    message: str


def validate_user_fields(
    name: Optional[str],
    age: Optional[int],
    address: Optional[str],
    partial: bool = False
) -> List[FieldError]:
    """
    Check field shape constraints for a user payload

    Args:
        name: Name value (required and non-blank unless partial)
        age: Age value (required unless partial)
        address: Optional free-form address
        partial: Update mode - absent fields and blank names are skipped

    Returns:
        List of (field, message) pairs, empty when the payload is valid
    """
    errors: List[FieldError] = []

    if name is None or not name.strip():
        if not partial:
            errors.append(FieldError("name", "name must not be blank"))
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(FieldError("name", f"name must be at most {NAME_MAX_LENGTH} characters"))

    if age is None:
        if not partial:
            errors.append(FieldError("age", "age is required"))
    elif age < AGE_MIN:
        errors.append(FieldError("age", f"age must be at least {AGE_MIN}"))
    elif age > AGE_MAX:
        errors.append(FieldError("age", f"age must be at most {AGE_MAX}"))

    if address is not None and len(address) > ADDRESS_MAX_LENGTH:
        errors.append(FieldError("address", f"address must be at most {ADDRESS_MAX_LENGTH} characters"))

    return errors


class UserPayload(BaseModel):
    """Request body for create and update; constraints are checked by validate_user_fields"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, validation_alias=AliasChoices("nome", "name"))
    age: Optional[int] = Field(None, validation_alias=AliasChoices("idade", "age"))
    address: Optional[str] = Field(None, validation_alias=AliasChoices("endereco", "address"))

    def validate_shape(self, partial: bool = False) -> List[FieldError]:
        return validate_user_fields(self.name, self.age, self.address, partial=partial)

    def to_user(self) -> User:
        return User(name=self.name, age=self.age, address=self.address)


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(..., serialization_alias="nome")
    age: int = Field(..., serialization_alias="idade")
    address: Optional[str] = Field(None, serialization_alias="endereco")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, age=user.age, address=user.address)
