"""
Dataset Entity Models

Pydantic models for the three datasets. JSON keys are camelCase on the
wire (``lastUpdated``, ``relatedComponents``, ``ariaLabels``); Python
attributes are snake_case. Models are frozen; collections are tuples.

``validate_collection`` validates a raw JSON array element by element,
dropping invalid elements and reporting them as formatted messages:

    "<Dataset> validation: <Label> <index>: <field path> <message>"
"""

from datetime import datetime
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel

TokenCategory = Literal["color", "typography", "spacing", "elevation", "motion"]

ModelT = TypeVar("ModelT", bound=BaseModel)


class DatasetModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; unset optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Design Tokens
# ============================================================================


class DesignToken(DatasetModel):
    name: str = Field(min_length=1)
    value: StrictStr | StrictInt | StrictFloat  # JSON booleans are not coerced to numbers
    category: TokenCategory
    description: str | None = None
    usage: tuple[str, ...] | None = None
    deprecated: bool | None = None
    aliases: tuple[str, ...] | None = None


# ============================================================================
# Components
# ============================================================================


class ComponentProp(DatasetModel):
    name: str = Field(min_length=1)
    type: str
    required: bool = False
    default: Any = None
    description: str = ""


class ComponentVariant(DatasetModel):
    name: str = Field(min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)
    description: str = ""


class ComponentExample(DatasetModel):
    title: str = Field(min_length=1)
    description: str = ""
    code: str
    language: str = ""


class AccessibilityInfo(DatasetModel):
    aria_labels: tuple[str, ...] | None = None
    keyboard_navigation: str | None = None
    screen_reader_support: str | None = None
    color_contrast: str | None = None


class Component(DatasetModel):
    name: str = Field(min_length=1)
    description: str
    category: str
    props: tuple[ComponentProp, ...]
    variants: tuple[ComponentVariant, ...]
    examples: tuple[ComponentExample, ...]
    guidelines: tuple[str, ...]
    accessibility: AccessibilityInfo

    @property
    def required_props(self) -> tuple[ComponentProp, ...]:
        return tuple(p for p in self.props if p.required)

    @property
    def optional_props(self) -> tuple[ComponentProp, ...]:
        return tuple(p for p in self.props if not p.required)


# ============================================================================
# Guidelines
# ============================================================================


class Guideline(DatasetModel):
    id: str = Field(min_length=1)
    title: str
    category: str
    content: str
    tags: tuple[str, ...]
    last_updated: datetime
    related_components: tuple[str, ...] | None = None
    related_tokens: tuple[str, ...] | None = None

    @field_validator("last_updated", mode="before")
    @classmethod
    def accept_bare_date(cls, v):
        # "2024-03-01" is read as midnight UTC
        if isinstance(v, str) and len(v) == 10:
            return f"{v}T00:00:00Z"
        return v


# ============================================================================
# Collection validation
# ============================================================================


def _format_error(error: dict[str, Any]) -> str:
    path = "".join(f"/{part}" for part in error["loc"])
    return f"{path} {error['msg']}".strip()


def validate_collection(
    items: list[Any],
    model: type[ModelT],
    dataset: str,
    label: str,
) -> tuple[list[ModelT], list[str]]:
    """
    Validate every element of ``items`` against ``model``.

    Args:
        items: Raw decoded JSON elements
        model: Entity model class
        dataset: Dataset title used in messages ("Design tokens")
        label: Element label used in messages ("Token")

    Returns:
        (valid entities in input order, one message per validation problem)
    """
    valid: list[ModelT] = []
    errors: list[str] = []

    for index, raw in enumerate(items):
        try:
            valid.append(model.model_validate(raw))
        except ValidationError as exc:
            errors.extend(
                f"{dataset} validation: {label} {index}: {_format_error(err)}" for err in exc.errors()
            )

    return valid, errors
