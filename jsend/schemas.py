from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr


class Envelope(BaseModel):
    """Field types a decoded JSend object must have before it becomes a response."""

    model_config = ConfigDict(extra="ignore")

    status: StrictStr
    data: Optional[Dict[str, Any]] = None
    message: Optional[StrictStr] = None
    code: Optional[Union[StrictInt, StrictStr]] = None

    def has_data_key(self) -> bool:
        return "data" in self.model_fields_set
