"""
Configuration of the privacy filter pipeline.
"""

from dataclasses import dataclass, field
from typing import Any

from ..exceptions import ValidationError
from .strategies import THROW_EXCEPTION, ErrorHandlingStrategy, strategy_by_name


@dataclass
class DataFileFilterConfiguration:
    """
    Features and error handling of a DataFileFilter.

    Error handling strategies apply when verification of a filter step
    finds:
        - unwanted modification: fields changed the filter does not declare
        - incomplete filtering: declared fields with an illegal outcome
        - unstable result: filtering the filtered line changes it again

    All strategies default to aborting the whole filter run.
    """

    # Features
    flight_plan_remarks_remove_all: bool = False
    flight_plan_remarks_remove_all_if_containing: list[str] = field(default_factory=list)
    remove_real_name_and_homebase: bool = False
    substitute_observer_prefix: bool = False

    # Error handling
    unwanted_modification_strategy: ErrorHandlingStrategy = THROW_EXCEPTION
    incomplete_filtering_strategy: ErrorHandlingStrategy = THROW_EXCEPTION
    unstable_result_strategy: ErrorHandlingStrategy = THROW_EXCEPTION

    def __post_init__(self):
        if self.flight_plan_remarks_remove_all_if_containing is None:
            raise ValidationError(
                "list of search strings must not be None; "
                "set to empty list instead if you want to disable the feature",
                field="flight_plan_remarks_remove_all_if_containing",
            )
        self.flight_plan_remarks_remove_all_if_containing = list(
            self.flight_plan_remarks_remove_all_if_containing
        )

    @property
    def is_any_feature_enabled(self) -> bool:
        return (
            self.flight_plan_remarks_remove_all
            or bool(self.flight_plan_remarks_remove_all_if_containing)
            or self.remove_real_name_and_homebase
            or self.substitute_observer_prefix
        )

    def validate(self) -> list[str]:
        """Validate settings values. Returns list of errors."""
        errors = []

        for trigger in self.flight_plan_remarks_remove_all_if_containing:
            if not isinstance(trigger, str) or not trigger.strip():
                errors.append(f"remarks trigger must be a non-blank string, got {trigger!r}")

        for name in (
            "unwanted_modification_strategy",
            "incomplete_filtering_strategy",
            "unstable_result_strategy",
        ):
            if not isinstance(getattr(self, name), ErrorHandlingStrategy):
                errors.append(f"{name} must be an ErrorHandlingStrategy")

        return errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "flight_plan_remarks_remove_all": self.flight_plan_remarks_remove_all,
            "flight_plan_remarks_remove_all_if_containing": list(
                self.flight_plan_remarks_remove_all_if_containing
            ),
            "remove_real_name_and_homebase": self.remove_real_name_and_homebase,
            "substitute_observer_prefix": self.substitute_observer_prefix,
            "unwanted_modification_strategy": self.unwanted_modification_strategy.name,
            "incomplete_filtering_strategy": self.incomplete_filtering_strategy.name,
            "unstable_result_strategy": self.unstable_result_strategy.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DataFileFilterConfiguration":
        """
        Create a configuration from a dictionary.

        Strategies are given by name ("keep_original", "remove_line",
        "ignore_error", "throw").

        Raises:
            ValidationError: If a strategy name is unknown
        """
        kwargs: dict[str, Any] = {}

        for key in (
            "flight_plan_remarks_remove_all",
            "remove_real_name_and_homebase",
            "substitute_observer_prefix",
        ):
            if key in data:
                kwargs[key] = bool(data[key])

        triggers = data.get("flight_plan_remarks_remove_all_if_containing")
        if triggers is not None:
            if isinstance(triggers, str):
                triggers = [triggers]
            kwargs["flight_plan_remarks_remove_all_if_containing"] = list(triggers)

        for key in (
            "unwanted_modification_strategy",
            "incomplete_filtering_strategy",
            "unstable_result_strategy",
        ):
            if data.get(key) is not None:
                kwargs[key] = strategy_by_name(data[key])

        return cls(**kwargs)
