"""Engine facade wiring settings, logging and per-user optimizers together."""

from __future__ import annotations

import logging
import random
import threading
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from composer_app.config import EngineSettings
from composer_app.logging_config import configure_logging, get_logger, log_event
from composer_app.observability import instrument_operation
from logic.compatibility_rules import validate_outfit
from logic.objective_evaluator import weather_suggestions
from logic.optimizer import OutfitOptimizer
from logic.validation import (
    GenerateOutfitsRequest,
    OutfitResponse,
    ValidateOutfitRequest,
    validation_failure,
)
from models.errors import InputError
from models.optimization import OptimizationConfig

LOGGER = get_logger(__name__)

EMPTY_RESULT_MESSAGE = "No outfit satisfies these constraints; add more items to your wardrobe or relax the constraints"


def _generate_failure(exc: ValidationError) -> Dict[str, Any]:
    return validation_failure("Invalid outfit generation request", exc)


def _validate_failure(exc: ValidationError) -> Dict[str, Any]:
    return validation_failure("Invalid outfit validation request", exc)


class OutfitComposerApp:
    """Entry point for the host application.

    Each user gets a dedicated :class:`OutfitOptimizer` so wear and seen-outfit
    history never leaks between sessions. The registry lock only guards
    optimizer creation; two concurrent runs for the same user still need
    external serialisation.
    """

    def __init__(self, settings: EngineSettings | None = None, configure_logs: bool = True) -> None:
        self.settings = settings or EngineSettings.from_env()
        if configure_logs:
            configure_logging(self.settings.log_level)
        self.default_config = OptimizationConfig.from_settings(self.settings)
        self._optimizers: Dict[str, OutfitOptimizer] = {}
        self._lock = threading.Lock()

    def optimizer_for(self, user_id: str) -> OutfitOptimizer:
        """Return the user's optimizer, creating it on first use."""

        with self._lock:
            optimizer = self._optimizers.get(user_id)
            if optimizer is None:
                rng = random.Random(self.settings.random_seed)
                optimizer = OutfitOptimizer(config=self.default_config, rng=rng, settings=self.settings)
                self._optimizers[user_id] = optimizer
                log_event(LOGGER, logging.DEBUG, "optimizer_created", sessions=len(self._optimizers))
            return optimizer

    def end_session(self, user_id: str) -> bool:
        with self._lock:
            return self._optimizers.pop(user_id, None) is not None

    @instrument_operation("generate_outfits", GenerateOutfitsRequest, on_validation_error=_generate_failure)
    def generate_outfits(self, request: GenerateOutfitsRequest) -> Dict[str, Any]:
        """Rank outfits for the user's inventory under the given constraints."""

        items = [payload.to_domain() for payload in request.items]
        constraints = request.constraints.to_domain()
        optimizer = self.optimizer_for(request.user_id)
        try:
            candidates = optimizer.optimize_outfits(
                items,
                constraints,
                seeds=request.seeds,
                config=request.config_overrides(self.default_config),
            )
        except InputError as exc:
            log_event(LOGGER, logging.WARNING, "generate_outfits_rejected", error=str(exc))
            return validation_failure("Invalid outfit generation request", exc)
        weather = constraints.weather
        response = OutfitResponse(
            status="ok",
            outfits=[candidate.to_dict() for candidate in candidates],
            suggestions=weather_suggestions(weather, self.settings) if weather else [],
            message=None if candidates else EMPTY_RESULT_MESSAGE,
        )
        log_event(LOGGER, logging.INFO, "outfits_generated", count=len(candidates), inventory=len(items))
        return response.model_dump()

    @instrument_operation("validate_outfit", ValidateOutfitRequest, on_validation_error=_validate_failure)
    def validate_outfit(self, request: ValidateOutfitRequest) -> Dict[str, Any]:
        """Check an outfit the user assembled by hand."""

        by_id = {payload.item_id: payload for payload in request.items}
        items = [by_id[item_id].to_domain() for item_id in request.item_ids]
        validation = validate_outfit(items, self.settings)
        return OutfitResponse(status="ok", validation=validation.to_dict()).model_dump()

    def record_wear(self, user_id: str, item_ids: Iterable[str]) -> Dict[str, int]:
        optimizer = self.optimizer_for(user_id)
        return {str(item_id): optimizer.record_wear(str(item_id)) for item_id in item_ids}

    def record_outfit_shown(self, user_id: str, item_ids: List[str]) -> str:
        if len(item_ids) < 2:
            raise InputError("An outfit needs at least 2 items")
        return self.optimizer_for(user_id).record_outfit_shown(item_ids)

    def reset_history(self, user_id: Optional[str] = None) -> None:
        """Clear one user's history, or every session's when no user is given."""

        with self._lock:
            optimizers = list(self._optimizers.values()) if user_id is None else [self._optimizers.get(user_id)]
        for optimizer in optimizers:
            if optimizer is not None:
                optimizer.reset_history()


__all__ = ["OutfitComposerApp", "EMPTY_RESULT_MESSAGE"]
