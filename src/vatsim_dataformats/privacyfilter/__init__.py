"""
Privacy filtering of legacy snapshot files.

Removes personal information from client lines while verifying that
nothing but the intended fields changed.

Usage:
    from vatsim_dataformats.privacyfilter import (
        DataFileFilter,
        DataFileFilterConfiguration,
        REMOVE_LINE,
    )

    configuration = DataFileFilterConfiguration(
        remove_real_name_and_homebase=True,
        flight_plan_remarks_remove_all_if_containing=["STREAM"],
        incomplete_filtering_strategy=REMOVE_LINE,
    )
    filtered_text = DataFileFilter(configuration).filter(text)
"""

from .configuration import DataFileFilterConfiguration
from .data_file_filter import SUPPORTED_FORMAT_VERSIONS, DataFileFilter, changed_fields
from .factory import VerifiableClientFilterFactory
from .filters import (
    FlightPlanRemarksRemoveAllFilter,
    RemoveRealNameAndHomebaseFilter,
    SubstituteObserverPrefixFilter,
    VerifiableClientFilter,
)
from .log_filter import shorten_log_line_content
from .report import FilterIssue, FilterReport, IssueCodes
from .strategies import (
    IGNORE_ERROR,
    KEEP_ORIGINAL_CONTENT,
    REMOVE_LINE,
    THROW_EXCEPTION,
    ErrorHandlingStrategy,
    IgnoreErrorStrategy,
    KeepOriginalContentStrategy,
    RemoveLineStrategy,
    ThrowExceptionStrategy,
    list_strategy_names,
    strategy_by_name,
)

__all__ = [
    # Pipeline
    "DataFileFilter",
    "DataFileFilterConfiguration",
    "SUPPORTED_FORMAT_VERSIONS",
    "changed_fields",
    # Filters
    "VerifiableClientFilter",
    "VerifiableClientFilterFactory",
    "RemoveRealNameAndHomebaseFilter",
    "SubstituteObserverPrefixFilter",
    "FlightPlanRemarksRemoveAllFilter",
    # Error handling strategies
    "ErrorHandlingStrategy",
    "KeepOriginalContentStrategy",
    "RemoveLineStrategy",
    "IgnoreErrorStrategy",
    "ThrowExceptionStrategy",
    "KEEP_ORIGINAL_CONTENT",
    "REMOVE_LINE",
    "IGNORE_ERROR",
    "THROW_EXCEPTION",
    "strategy_by_name",
    "list_strategy_names",
    # Reporting
    "FilterReport",
    "FilterIssue",
    "IssueCodes",
    # Log shortening
    "shorten_log_line_content",
]
