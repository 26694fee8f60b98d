from dataclasses import dataclass
from enum import Enum
from typing import Union


class UnknownAttributes(str, Enum):
    """
    What happens to attributes that the target schema does not recognize.
    """

    IGNORE = "ignore"
    REJECT = "reject"


@dataclass(frozen=True)
class ConversionConfig:
    """
    Configuration of the conversions between generic entries and typed resources.

    Args:
        unknown_attributes: Policy for attributes left unconsumed after all the attributes
            known to the schema have been decoded. With `IGNORE` they are dropped, with `REJECT`
            the first of them fails the conversion with `InvalidAttribute` error.
    """

    unknown_attributes: UnknownAttributes = UnknownAttributes.IGNORE

    @classmethod
    def create(
        cls, unknown_attributes: Union[str, UnknownAttributes] = UnknownAttributes.IGNORE
    ) -> "ConversionConfig":
        return cls(unknown_attributes=UnknownAttributes(unknown_attributes))


conversion_config: ConversionConfig = ConversionConfig.create()


def set_conversion_config(config: ConversionConfig) -> None:
    """
    Sets global conversion configuration.
    """
    global conversion_config
    conversion_config = config
