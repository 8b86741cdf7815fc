"""Pydantic schemas for validating raw engine requests from the host application."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from models.optimization import OptimizationConfig, OutfitConstraints, WeatherSnapshot
from models.taxonomy import validate_category, validate_formality, validate_texture
from models.wardrobe_item import ClothingItem


def _repeated(values: List[str]) -> List[str]:
    seen: set[str] = set()
    repeated: List[str] = []
    for value in values:
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


class ItemPayload(BaseModel):
    """One inventory row as supplied by the storage layer."""

    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(min_length=1, alias="id")
    category: str
    colors: List[str] = []
    texture: str
    formality: str
    cost: Optional[int] = Field(default=None, ge=0)
    last_worn: Optional[datetime] = Field(default=None, alias="lastWorn")
    wear_count: Optional[int] = Field(default=None, ge=0, alias="wearCount")
    kind: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _keep_garment_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("kind") and data.get("category"):
            return {**data, "kind": data["category"]}
        return data

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        return validate_category(value).value

    @field_validator("texture")
    @classmethod
    def _known_texture(cls, value: str) -> str:
        return validate_texture(value).value

    @field_validator("formality")
    @classmethod
    def _known_formality(cls, value: str) -> str:
        return validate_formality(value).value

    def to_domain(self) -> ClothingItem:
        return ClothingItem(
            item_id=self.item_id,
            category=self.category,  # type: ignore[arg-type]
            texture=self.texture,  # type: ignore[arg-type]
            formality=self.formality,  # type: ignore[arg-type]
            colors=list(self.colors),
            cost=self.cost,
            last_worn=self.last_worn,
            wear_count=self.wear_count,
            kind=self.kind,
        )


class WeatherPayload(BaseModel):
    """Aggregated weather snapshot from the external provider."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float
    precipitation: float = Field(default=0.0, ge=0)
    wind_speed: Optional[float] = Field(default=None, ge=0, alias="windSpeed")
    humidity: Optional[float] = Field(default=None, ge=0, le=100)

    def to_domain(self) -> WeatherSnapshot:
        return WeatherSnapshot(
            temperature_c=self.temperature,
            precipitation_mm_h=self.precipitation,
            wind_speed_kmh=self.wind_speed,
            humidity_pct=self.humidity,
        )


class ConstraintsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_cost: Optional[int] = Field(default=None, ge=0, alias="maxCost")
    formality: Optional[str] = None
    occasion: Optional[str] = None
    weather: Optional[WeatherPayload] = None

    @field_validator("formality")
    @classmethod
    def _known_formality(cls, value: Optional[str]) -> Optional[str]:
        return validate_formality(value).value if value else None

    def to_domain(self) -> OutfitConstraints:
        return OutfitConstraints(
            max_cost=self.max_cost,
            formality=self.formality,  # type: ignore[arg-type]
            occasion=self.occasion,
            weather=self.weather.to_domain() if self.weather else None,
        )


class GenerateOutfitsRequest(BaseModel):
    """Input contract for ranked outfit generation."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(min_length=1, alias="userId")
    items: List[ItemPayload] = Field(min_length=2)
    constraints: ConstraintsPayload = ConstraintsPayload()
    seeds: List[List[str]] = []
    max_candidates: Optional[int] = Field(default=None, ge=1, alias="maxCandidates")
    time_limit_ms: Optional[int] = Field(default=None, ge=0, alias="timeLimitMs")

    @model_validator(mode="after")
    def _inventory_consistent(self) -> "GenerateOutfitsRequest":
        repeated = _repeated([item.item_id for item in self.items])
        if repeated:
            raise ValueError(f"Inventory repeats item ids {repeated}")
        known = {item.item_id for item in self.items}
        for seed in self.seeds:
            if not 2 <= len(seed) <= 4 or len(set(seed)) != len(seed):
                raise ValueError(f"Seed {seed} must hold 2 to 4 distinct item ids")
            unknown = [item_id for item_id in seed if item_id not in known]
            if unknown:
                raise ValueError(f"Seed references unknown items {unknown}")
        return self

    def config_overrides(self, base: OptimizationConfig) -> OptimizationConfig:
        return base.with_overrides(max_candidates=self.max_candidates, time_limit_ms=self.time_limit_ms)


class ValidateOutfitRequest(BaseModel):
    """Input contract for validating an outfit the user assembled manually."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(min_length=1, alias="userId")
    item_ids: List[str] = Field(min_length=2, alias="itemIds")
    items: List[ItemPayload]

    @model_validator(mode="after")
    def _ids_unique_and_present(self) -> "ValidateOutfitRequest":
        repeated = _repeated([item.item_id for item in self.items]) or _repeated(self.item_ids)
        if repeated:
            raise ValueError(f"Item ids must be unique: {repeated}")
        known = {item.item_id for item in self.items}
        unknown = [item_id for item_id in self.item_ids if item_id not in known]
        if unknown:
            raise ValueError(f"Some items not found or not accessible: {unknown}")
        return self


class OutfitResponse(BaseModel):
    """Envelope returned to the host application."""

    status: Literal["ok", "needs_review"]
    outfits: List[Dict[str, Any]] = []
    validation: Optional[Dict[str, Any]] = None
    suggestions: List[str] = []
    message: Optional[str] = None


class ValidationResult(BaseModel):
    """Wrapper returned when a request fails validation."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError | ValueError) -> Dict[str, Any]:
    """Translate validation errors into a consistent review payload."""

    if isinstance(exc, ValidationError):
        details = exc.errors(include_url=False, include_context=False)
    else:
        details = [{"type": "value_error", "msg": str(exc)}]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "ItemPayload",
    "WeatherPayload",
    "ConstraintsPayload",
    "GenerateOutfitsRequest",
    "ValidateOutfitRequest",
    "OutfitResponse",
    "ValidationResult",
    "validation_failure",
]
