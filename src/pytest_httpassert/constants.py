from enum import StrEnum

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ConfigOptions(StrEnum):
    """Configuration option names for the pytest-httpassert plugin."""

    TIMEOUT = "httpassert_timeout"
    PARSER = "httpassert_parser"
    REPORT_EXCHANGE = "httpassert_report_exchange"
