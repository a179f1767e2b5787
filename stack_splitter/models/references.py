"""Reference expression models.

A reference expression is either a plain ``Ref`` to a whole resource or an
``Fn::GetAtt`` lookup of one of its attributes. Both are modelled as a closed
tagged union so rewriting code never has to inspect raw intrinsic dicts.
"""

import re
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..constants import GET_ATT, REF

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


class PlainReference(BaseModel):
    """``{"Ref": target}``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["plain"] = "plain"
    target: str

    @property
    def key(self) -> tuple[str, ...]:
        return (self.kind, self.target)

    @property
    def suffix(self) -> str:
        return "Ref"

    def to_expression(self) -> dict[str, Any]:
        return {REF: self.target}


class AttributeReference(BaseModel):
    """``{"Fn::GetAtt": [target, attribute]}`` or ``{"Fn::GetAtt": "target.attribute"}``"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["attribute"] = "attribute"
    target: str
    attribute: str
    dotted: bool = False

    @property
    def key(self) -> tuple[str, ...]:
        # Notation does not change what is referenced
        return (self.kind, self.target, self.attribute)

    @property
    def suffix(self) -> str:
        return _NON_ALPHANUMERIC.sub("", self.attribute)

    def to_expression(self) -> dict[str, Any]:
        if self.dotted:
            return {GET_ATT: f"{self.target}.{self.attribute}"}
        return {GET_ATT: [self.target, self.attribute]}


Reference = Annotated[PlainReference | AttributeReference, Field(discriminator="kind")]


class ReferenceSite(BaseModel):
    """A reference together with the path where it sits inside a value."""

    model_config = ConfigDict(frozen=True)

    path: tuple[str | int, ...]
    reference: Reference
