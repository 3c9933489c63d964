from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


ELEMENT_BLOCK_NAME = "universal/element"
DEFAULT_LOOP_VARIABLE = "item"


def parse_flag(value: Any) -> bool:
    """Booleans pass through; otherwise only "true" or "1" read as true."""
    if isinstance(value, bool):
        return value
    return value is not None and str(value) in ("true", "1")


def _expect(value: Any, kind: type, field: str) -> Any:
    if value is not None and not isinstance(value, kind):
        raise ValueError(f"{field} must be a {kind.__name__}, got {type(value).__name__}")
    return value


class ContentType(str, Enum):
    BLOCKS = "blocks"
    TEXT = "text"
    HTML = "html"
    EMPTY = "empty"


class LoopSpec(BaseModel):
    source: str
    variable: str = DEFAULT_LOOP_VARIABLE


class ConditionalSpec(BaseModel):
    enabled: bool = True
    expression: str = ""


class AssignmentSpec(BaseModel):
    variable: str = ""
    expression: str = ""


class BlockNode(BaseModel):
    """One HTML element (or custom block) plus its Twig directives.

    Field aliases follow the ``universal/element`` block attribute names so
    that ``BlockNode.model_validate`` accepts the editor's camelCase keys.
    Non-element blocks produced by custom handlers keep their raw attribute
    dictionary in ``block_attributes``.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = ELEMENT_BLOCK_NAME
    tag: str = Field("div", alias="tagName")
    content_type: ContentType = Field(ContentType.TEXT, alias="contentType")
    content: str = ""
    children: List["BlockNode"] = Field(default_factory=list, alias="innerBlocks")
    attributes: Dict[str, str] = Field(default_factory=dict, alias="globalAttrs")
    class_name: Optional[str] = Field(None, alias="className")
    block_identity: Optional[str] = Field(None, alias="blockIdentity")
    loop: Optional[LoopSpec] = None
    conditional: Optional[ConditionalSpec] = None
    assignment: Optional[AssignmentSpec] = None
    block_attributes: Dict[str, Any] = Field(default_factory=dict, alias="blockAttributes")

    @property
    def is_element(self) -> bool:
        return self.name == ELEMENT_BLOCK_NAME

    def to_block_dict(self) -> Dict[str, Any]:
        """Return the ``{name, attributes, innerBlocks}`` shape stored by WordPress."""
        inner = [child.to_block_dict() for child in self.children]
        if not self.is_element:
            return {"name": self.name, "attributes": dict(self.block_attributes), "innerBlocks": inner}

        attrs: Dict[str, Any] = {
            "tagName": self.tag,
            "contentType": self.content_type.value,
        }
        if self.block_identity:
            attrs["metadata"] = {"name": self.block_identity}
        if self.attributes:
            attrs["globalAttrs"] = dict(self.attributes)
        if self.class_name:
            attrs["className"] = self.class_name
        if self.content_type in (ContentType.TEXT, ContentType.HTML) and self.content:
            attrs["content"] = self.content
        if self.loop and self.loop.source:
            attrs["loopSource"] = self.loop.source
            if self.loop.variable and self.loop.variable != DEFAULT_LOOP_VARIABLE:
                attrs["loopVariable"] = self.loop.variable
        if self.conditional:
            if self.conditional.expression:
                attrs["conditionalVisibility"] = True
                attrs["conditionalExpression"] = self.conditional.expression
            else:
                attrs["conditionalVisibility"] = self.conditional.enabled
        if self.assignment:
            if self.assignment.variable:
                attrs["setVariable"] = self.assignment.variable
            if self.assignment.expression:
                attrs["setExpression"] = self.assignment.expression
        return {"name": self.name, "attributes": attrs, "innerBlocks": inner}

    @classmethod
    def from_block_dict(cls, data: Dict[str, Any]) -> "BlockNode":
        name = _expect(data.get("name"), str, "name") or ELEMENT_BLOCK_NAME
        attrs: Dict[str, Any] = dict(_expect(data.get("attributes"), dict, "attributes") or {})
        children = [
            cls.from_block_dict(_expect(child, dict, "inner block"))
            for child in _expect(data.get("innerBlocks"), list, "innerBlocks") or []
        ]
        if name != ELEMENT_BLOCK_NAME:
            return cls(name=name, tag=name, content_type=ContentType.EMPTY, children=children, block_attributes=attrs)

        metadata = _expect(attrs.get("metadata"), dict, "metadata") or {}
        global_attrs = _expect(attrs.get("globalAttrs"), dict, "globalAttrs") or {}
        loop = None
        if attrs.get("loopSource"):
            loop = LoopSpec(
                source=attrs["loopSource"],
                variable=attrs.get("loopVariable") or DEFAULT_LOOP_VARIABLE,
            )
        conditional = None
        if attrs.get("conditionalExpression") or "conditionalVisibility" in attrs:
            expression = attrs.get("conditionalExpression") or ""
            conditional = ConditionalSpec(
                enabled=bool(expression) or parse_flag(attrs.get("conditionalVisibility")),
                expression=expression,
            )
        assignment = None
        if attrs.get("setVariable") or attrs.get("setExpression"):
            assignment = AssignmentSpec(
                variable=attrs.get("setVariable") or "",
                expression=attrs.get("setExpression") or "",
            )
        return cls(
            tag=attrs.get("tagName") or "div",
            content_type=ContentType(attrs.get("contentType") or ContentType.TEXT.value),
            content=attrs.get("content") or "",
            children=children,
            attributes={str(k): str(v) for k, v in global_attrs.items()},
            class_name=attrs.get("className") or None,
            block_identity=metadata.get("name") or None,
            loop=loop,
            conditional=conditional,
            assignment=assignment,
        )


BlockNode.model_rebuild()
