"""
Builds the filter chain for a configuration.
"""

import logging

from ..exceptions import UnconfiguredError
from .configuration import DataFileFilterConfiguration
from .filters import (
    FlightPlanRemarksRemoveAllFilter,
    RemoveRealNameAndHomebaseFilter,
    SubstituteObserverPrefixFilter,
    VerifiableClientFilter,
)

logger = logging.getLogger(__name__)


class VerifiableClientFilterFactory:
    """Creates filters in the fixed order real name, observer prefix, remarks."""

    def build_from_configuration(
        self, configuration: DataFileFilterConfiguration
    ) -> list[VerifiableClientFilter]:
        """
        Build the filter chain.

        Unconditional removal of remarks takes precedence over removal
        triggered by search phrases.

        Raises:
            ValueError: If configuration is None
            UnconfiguredError: If no feature is enabled
        """
        if configuration is None:
            raise ValueError("unable to build filter chain from None configuration")

        if not configuration.is_any_feature_enabled:
            raise UnconfiguredError("unable to build filter chain when no features have been requested")

        filters: list[VerifiableClientFilter] = []

        if configuration.remove_real_name_and_homebase:
            filters.append(RemoveRealNameAndHomebaseFilter())

        if configuration.substitute_observer_prefix:
            filters.append(SubstituteObserverPrefixFilter())

        triggers = configuration.flight_plan_remarks_remove_all_if_containing
        if configuration.flight_plan_remarks_remove_all:
            filters.append(self.create_flight_plan_remarks_remove_all_filter(None))
        elif triggers:
            filters.append(self.create_flight_plan_remarks_remove_all_filter(triggers))

        logger.debug(f"Built filter chain: {[type(f).__name__ for f in filters]}")
        return filters

    def create_flight_plan_remarks_remove_all_filter(self, triggers) -> FlightPlanRemarksRemoveAllFilter:
        return FlightPlanRemarksRemoveAllFilter(triggers)
