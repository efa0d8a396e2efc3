# agents/schemas.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ElementMini(BaseModel):
    """
    Minimal description of an interactive element with a stable selector hint.
    """
    role: Optional[str] = None
    text: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    aria_label: Optional[str] = None
    data_testid: Optional[str] = None
    selector_hint: Optional[str] = None


class Observation(BaseModel):
    """
    Snapshot of the current page that is small enough to put in a prompt.
    """
    url: str
    title: Optional[str] = None
    visible_texts: List[str] = Field(default_factory=list)
    buttons: List[ElementMini] = Field(default_factory=list)
    inputs: List[ElementMini] = Field(default_factory=list)
    flags: Dict[str, Any] = Field(default_factory=dict)


class PlannedStep(BaseModel):
    """One low-level page operation chosen by the model for an --action instruction."""
    type: str
    selector: Optional[str] = None
    value: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _normalize_type(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)


class ActionPlan(BaseModel):
    steps: List[PlannedStep] = Field(default_factory=list)


class AssertionVerdict(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    passed: bool = Field(alias="pass")
    thought: str = ""


class QueryAnswer(BaseModel):
    data: Any = None
