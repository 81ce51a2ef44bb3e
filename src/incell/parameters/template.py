"""Fixed export layout: parameter names, categories and declared ranges.

The declared ranges are display metadata only; nothing validates values
against them.
"""

from __future__ import annotations

from typing import NamedTuple


class TemplateRow(NamedTuple):
    """One exported parameter row."""

    category: str
    name: str
    value_range: str


HEADER_ROW: tuple[str | None, ...] = ("Parameter", None, "Value", "Range")

# Label in the name column that marks a header row on import
HEADER_LABEL = "Parameter"

EXPORT_TEMPLATE: tuple[TemplateRow, ...] = (
    # Power rails
    TemplateRow("Power", "VDD Voltage", "2.7 ~ 3.6 V"),
    TemplateRow("Power", "IOVCC Voltage", "1.65 ~ 3.6 V"),
    TemplateRow("Power", "VSP Voltage", "4.5 ~ 6.5 V"),
    TemplateRow("Power", "VSN Voltage", "-6.5 ~ -4.5 V"),
    TemplateRow("Power", "VGH Voltage", "8 ~ 18 V"),
    TemplateRow("Power", "VGL Voltage", "-14 ~ -6 V"),
    TemplateRow("Power", "VCOM Voltage", "-2.5 ~ 0 V"),
    TemplateRow("Power", "Current Limit", "0 ~ 500 mA"),
    # Display timing
    TemplateRow("Timing", "Frame Rate", "30 ~ 120 Hz"),
    TemplateRow("Timing", "Pixel Clock", "10 ~ 200 MHz"),
    TemplateRow("Timing", "H Active", "1 ~ 4096"),
    TemplateRow("Timing", "H Front Porch", "1 ~ 255"),
    TemplateRow("Timing", "H Back Porch", "1 ~ 255"),
    TemplateRow("Timing", "H Sync Width", "1 ~ 255"),
    TemplateRow("Timing", "V Active", "1 ~ 4096"),
    TemplateRow("Timing", "V Front Porch", "1 ~ 255"),
    TemplateRow("Timing", "V Back Porch", "1 ~ 255"),
    TemplateRow("Timing", "V Sync Width", "1 ~ 255"),
    # Host interface
    TemplateRow("Interface", "MIPI Lanes", "1 ~ 4"),
    TemplateRow("Interface", "MIPI Bit Rate", "80 ~ 1500 Mbps"),
    TemplateRow("Interface", "I2C Address", "0x00 ~ 0x7F"),
    TemplateRow("Interface", "I2C Speed", "100 ~ 1000 kHz"),
    TemplateRow("Interface", "Reset Delay", "0 ~ 1000 ms"),
    # Touch controller
    TemplateRow("Touch", "TX Channels", "1 ~ 64"),
    TemplateRow("Touch", "RX Channels", "1 ~ 64"),
    TemplateRow("Touch", "Scan Frequency", "50 ~ 500 kHz"),
    TemplateRow("Touch", "Touch Threshold", "0 ~ 4095"),
    TemplateRow("Touch", "Noise Threshold", "0 ~ 4095"),
    TemplateRow("Touch", "Report Rate", "60 ~ 240 Hz"),
    TemplateRow("Touch", "Finger Count", "1 ~ 10"),
    # Pass/fail limits
    TemplateRow("Test Limits", "Raw Data Min", "0 ~ 65535"),
    TemplateRow("Test Limits", "Raw Data Max", "0 ~ 65535"),
    TemplateRow("Test Limits", "Open Threshold", "0 ~ 65535"),
    TemplateRow("Test Limits", "Short Threshold", "0 ~ 100 MOhm"),
    TemplateRow("Test Limits", "Uniformity Limit", "0 ~ 100 %"),
    TemplateRow("Test Limits", "CB Min", "0 ~ 255"),
    TemplateRow("Test Limits", "CB Max", "0 ~ 255"),
    TemplateRow("Test Limits", "Test Timeout", "1 ~ 600 s"),
)

TEMPLATE_NAMES: frozenset[str] = frozenset(row.name for row in EXPORT_TEMPLATE)


def categories() -> list[str]:
    """Template categories in first-appearance order."""
    seen: dict[str, None] = {}
    for row in EXPORT_TEMPLATE:
        seen.setdefault(row.category, None)
    return list(seen)


def rows_for(category: str) -> list[TemplateRow]:
    return [row for row in EXPORT_TEMPLATE if row.category == category]
