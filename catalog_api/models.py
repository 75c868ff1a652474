# catalog_api/models.py
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError
from typing import Annotated, Any, Dict, List, Optional, Union

from .errors import invalid_payload

REQUIRED_FIELDS = ("name", "price", "category")

# JSON NaN and overflowing literals (1e400) parse to nan/inf; they cannot be stored and read back
FiniteFloat = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class ResourceIn(BaseModel):
    """Request body for create, replace and patch.

    The core fields are typed but optional here; which of them must be
    present depends on the operation and is checked by the handlers.
    Any other field is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    price: Optional[Union[StrictInt, FiniteFloat]] = None
    category: Optional[str] = None

    def supplied(self) -> Dict[str, Any]:
        """Only the keys the client actually sent, minus any identifier."""
        data = {name: getattr(self, name) for name in REQUIRED_FIELDS if name in self.model_fields_set}
        data.update(self.model_extra or {})
        data.pop("id", None)
        data.pop("_id", None)
        return data


class ResourceList(BaseModel):
    count: int
    resources: List[Dict[str, Any]]


class ResourceAck(BaseModel):
    message: str
    id: str


def parse_body(body: Any) -> ResourceIn:
    """Validate a raw JSON body; called after the path id has been checked."""
    try:
        return ResourceIn.model_validate(body)
    except ValidationError as e:
        raise invalid_payload(e.errors())
