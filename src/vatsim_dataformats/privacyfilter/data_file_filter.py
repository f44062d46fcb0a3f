"""
Privacy filtering of complete legacy snapshot files.

Filters are applied to every line of the CLIENTS and PREFILE sections.
Each filter step is verified by parsing the line before and after the
step and comparing all client fields:

    1. fields changed the filter does not declare -> unwanted modification
    2. declared fields with an illegal outcome     -> incomplete filtering
    3. filtering the result changes it again       -> unstable result

Failures are handed to the error handling strategy configured for the
kind of failure, which decides what is output instead.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Collection, Optional

from ..exceptions import ValidationError
from ..parser.base import Client, DataFile
from ..parser.client_fields import ClientField
from ..parser.helpers import values_equal
from ..parser.legacy.client import ClientParser
from ..parser.legacy.data_file import (
    SECTION_NAME_CLIENTS,
    SECTION_NAME_GENERAL,
    SECTION_NAME_PREFILE,
    read_relevant_lines_by_section,
)
from ..parser.legacy.general import GeneralSectionParser
from ..parser.legacy.section_processor import DataFileSectionLineProcessor
from ..parser.log import ParserLog
from .configuration import DataFileFilterConfiguration
from .factory import VerifiableClientFilterFactory
from .filters import VerifiableClientFilter
from .report import FilterIssue, FilterReport, IssueCodes
from .strategies import ErrorHandlingStrategy

logger = logging.getLogger(__name__)

SUPPORTED_FORMAT_VERSIONS = frozenset({8, 9})

MAX_REPORTED_LINE_LENGTH = 80


def changed_fields(original: Client, filtered: Client) -> set[ClientField]:
    """Return all fields whose values differ between two clients."""
    return {
        field
        for field in ClientField
        if not values_equal(field.get_from(original), field.get_from(filtered))
    }


class DataFileFilter:
    """
    Applies a configured privacy filter chain to legacy snapshot files.

    Usage:
        configuration = DataFileFilterConfiguration(remove_real_name_and_homebase=True)
        data_file_filter = DataFileFilter(configuration)
        filtered_text = data_file_filter.filter(text)
        print(data_file_filter.last_report.to_dict())
    """

    def __init__(
        self,
        configuration: DataFileFilterConfiguration,
        factory: Optional[VerifiableClientFilterFactory] = None,
    ):
        """
        Initialize the filter.

        Raises:
            ValueError: If configuration is None
            UnconfiguredError: If the configuration enables no feature
        """
        if configuration is None:
            raise ValueError("configuration must not be None")

        self.configuration = configuration
        self.filters: list[VerifiableClientFilter] = (
            factory or VerifiableClientFilterFactory()
        ).build_from_configuration(configuration)
        self.last_report: Optional[FilterReport] = None

    def is_format_version_supported(self, format_version: Optional[int]) -> bool:
        return format_version in SUPPORTED_FORMAT_VERSIONS

    @property
    def declared_fields(self) -> frozenset[ClientField]:
        """Union of the fields all configured filters may change."""
        fields: set[ClientField] = set()
        for client_filter in self.filters:
            fields |= client_filter.affected_fields
        return frozenset(fields)

    # =========================================================================
    # Filtering
    # =========================================================================

    def filter(self, text: str) -> str:
        """
        Filter a complete legacy snapshot.

        Args:
            text: Decoded file content

        Returns:
            Filtered file content; everything outside client lines and
            all line separators are kept as found

        Raises:
            ValidationError: If the file states an unsupported format version
            FilterAbortedError: If a strategy aborted filtering
        """
        report = FilterReport(
            start_time=datetime.now(timezone.utc),
            filters=[type(f).__name__ for f in self.filters],
        )
        self.last_report = report

        report.format_version = self._read_format_version(text)
        if report.format_version is None:
            logger.warning("Unable to verify format version of data file to filter")
        elif not self.is_format_version_supported(report.format_version):
            raise ValidationError(
                "Unsupported format version for filtering",
                field="VERSION",
                value=report.format_version,
            )

        processor = DataFileSectionLineProcessor(text)
        for section_name, is_prefile in ((SECTION_NAME_CLIENTS, False), (SECTION_NAME_PREFILE, True)):
            client_parser = ClientParser(is_parsing_prefile_section=is_prefile)
            processor.apply(
                section_name,
                lambda line, parser=client_parser, section=section_name: self._filter_line(
                    line, parser, section, report
                ),
            )

        result = processor.result_as_string()
        report.end_time = datetime.now(timezone.utc)

        logger.info(
            f"Filtered {report.lines_processed} lines: {report.lines_modified} modified, "
            f"{report.lines_removed} removed, {report.lines_restored} restored, "
            f"{len(report.issues)} issues"
        )
        return result

    def _read_format_version(self, text: str) -> Optional[int]:
        lines_by_section = read_relevant_lines_by_section(text, ParserLog())
        metadata = GeneralSectionParser().parse(
            lines_by_section.get(SECTION_NAME_GENERAL), ParserLog(), SECTION_NAME_GENERAL
        )
        return metadata.version_format

    def _filter_line(
        self, line: str, client_parser: ClientParser, section: str, report: FilterReport
    ) -> Optional[str]:
        report.lines_processed += 1

        current = line
        for client_filter in self.filters:
            current = self._apply_verified(client_filter, current, client_parser, section, report)
            if current is None:
                report.lines_removed += 1
                return None

        if current == line:
            return current

        report.lines_modified += 1
        return current

    def _apply_verified(
        self,
        client_filter: VerifiableClientFilter,
        original: str,
        client_parser: ClientParser,
        section: str,
        report: FilterReport,
    ) -> Optional[str]:
        """
        Apply one filter and route verification failures to strategies.

        Lines the parser rejects are only routed to a strategy if the filter
        modified them, untouched lines pass through unverified.
        """
        filtered = client_filter.apply(original)
        configuration = self.configuration

        try:
            original_client = client_parser.parse(original)
        except ValueError as e:
            if filtered == original:
                logger.debug(f"Original line cannot be parsed but was not modified: {e}")
                return original

            logger.debug(f"Original line cannot be verified: {e}")
            return self._handle(
                configuration.incomplete_filtering_strategy,
                IssueCodes.UNPARSEABLE_ORIGINAL,
                "original line cannot be parsed, filtering cannot be verified",
                client_filter,
                original,
                filtered,
                client_filter.affected_fields,
                section,
                report,
            )

        try:
            filtered_client = client_parser.parse(filtered)
        except ValueError as e:
            logger.debug(f"Filtered line cannot be parsed: {e}")
            return self._handle(
                configuration.unwanted_modification_strategy,
                IssueCodes.UNPARSEABLE_RESULT,
                "filtered line cannot be parsed",
                client_filter,
                original,
                filtered,
                ClientField.all_fields(),
                section,
                report,
            )

        unwanted = changed_fields(original_client, filtered_client) - client_filter.affected_fields
        if unwanted:
            return self._handle(
                configuration.unwanted_modification_strategy,
                IssueCodes.UNWANTED_MODIFICATION,
                "filter changed fields it does not declare",
                client_filter,
                original,
                filtered,
                unwanted,
                section,
                report,
            )

        incomplete = {
            field
            for field in client_filter.affected_fields
            if not client_filter.verify_affected_field(
                field, field.get_from(original_client), field.get_from(filtered_client)
            )
        }
        if incomplete:
            return self._handle(
                configuration.incomplete_filtering_strategy,
                IssueCodes.INCOMPLETE_FILTERING,
                "filter result is not a legal outcome",
                client_filter,
                original,
                filtered,
                incomplete,
                section,
                report,
            )

        if client_filter.apply(filtered) != filtered:
            return self._handle(
                configuration.unstable_result_strategy,
                IssueCodes.UNSTABLE_RESULT,
                "filtering the result changes it again",
                client_filter,
                original,
                filtered,
                client_filter.affected_fields,
                section,
                report,
            )

        return filtered

    def _handle(
        self,
        strategy: ErrorHandlingStrategy,
        error_code: str,
        message: str,
        client_filter: VerifiableClientFilter,
        original: str,
        filtered: str,
        fields: Collection[ClientField],
        section: str,
        report: FilterReport,
    ) -> Optional[str]:
        filter_name = type(client_filter).__name__
        logger.warning(
            f"{filter_name} failed verification in section {section} ({error_code}), "
            f"handling with {type(strategy).__name__}"
        )
        report.issues.append(
            FilterIssue(
                error_code=error_code,
                message=message,
                section=section,
                filter_name=filter_name,
                fields=tuple(sorted(field.name for field in fields)),
                strategy=strategy.name,
                line_content=original[:MAX_REPORTED_LINE_LENGTH],
            )
        )

        result = strategy.handle_error(original, filtered, fields)
        if result is not None and result == original and filtered != original:
            report.lines_restored += 1
        return result

    # =========================================================================
    # Verification of parsed results
    # =========================================================================

    def verify_only_wanted_modifications(self, original: DataFile, filtered: DataFile) -> bool:
        """
        Check that two parsed files differ only in fields the filters declare.

        Metadata and servers must be equal; clients are compared pairwise
        in order so removed lines also fail verification.
        """
        if original.metadata != filtered.metadata:
            logger.debug("Metadata differs after filtering")
            return False

        if list(original.fsd_servers) != list(filtered.fsd_servers):
            logger.debug("FSD servers differ after filtering")
            return False

        if list(original.voice_servers) != list(filtered.voice_servers):
            logger.debug("Voice servers differ after filtering")
            return False

        if len(original.clients) != len(filtered.clients):
            logger.debug(
                f"Number of clients differs after filtering: "
                f"{len(original.clients)} != {len(filtered.clients)}"
            )
            return False

        declared = self.declared_fields
        for original_client, filtered_client in zip(original.clients, filtered.clients):
            unwanted = changed_fields(original_client, filtered_client) - declared
            if unwanted:
                logger.debug(
                    f"Client {original_client.callsign} has unwanted modifications: "
                    f"{sorted(field.name for field in unwanted)}"
                )
                return False

        return True

    def verify_no_additional_log_messages(self, original: DataFile, filtered: DataFile) -> bool:
        """
        Check that parsing the filtered file did not produce new log entries.

        Entries are compared by section and rejection only since messages
        may quote the (filtered) line content.
        """
        original_keys = Counter(
            (entry.section, entry.is_line_rejected) for entry in original.parser_log_entries
        )
        filtered_keys = Counter(
            (entry.section, entry.is_line_rejected) for entry in filtered.parser_log_entries
        )
        return not (filtered_keys - original_keys)
