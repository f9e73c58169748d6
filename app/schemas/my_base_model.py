import dataclasses
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class CustomBaseModel(BaseModel):
    """Custom base model for all response schemas.
    - pre-process the data before init
    - set the default value if the value is invalid
    - fields are snake_case in python and camelCase on the wire (aliases)
    """

    model_config = ConfigDict(populate_by_name=True)

    def __init__(self, **data: Any) -> None:
        default_value = 0
        for attr, value in data.items():
            attr_type = None
            me = self.__class__
            while attr_type is None and me != CustomBaseModel:
                try:
                    attr_type = me.model_fields[attr].annotation
                except Exception:
                    if me.__base__ is not None:
                        me = me.__base__
                    else:
                        break
                    continue

            # process simple type
            if attr_type in (int, float, str, bool, dict):
                try:  #  try to convert the value to the type of the attribute
                    data[attr] = attr_type(value)
                except Exception:
                    logger.warning("Invalid value for key: %s", attr)
                    if attr in me.model_fields and me.model_fields[attr].default is not None:
                        data[attr] = me.model_fields[attr].default
                    else:  # set the custom default value it don't have default value
                        if attr_type is dict:
                            data[attr] = {}
                        elif attr_type is str:
                            data[attr] = ""
                        elif attr_type is bool:
                            data[attr] = False
                        elif attr_type is int:
                            data[attr] = int(default_value)
                        elif attr_type is float:
                            data[attr] = float(default_value)
        super().__init__(**data)

    @classmethod
    def from_record(cls, record: Any):
        """Build the schema from a registry record (dataclass) or a dict."""
        if dataclasses.is_dataclass(record) and not isinstance(record, type):
            return cls(**dataclasses.asdict(record))
        elif isinstance(record, dict):
            return cls(**record)
        else:
            raise ValueError(f"Invalid record type: {type(record)}")
