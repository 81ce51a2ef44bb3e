"""Dark theme configuration for the UI."""

from __future__ import annotations

COLORS = {
    "bg_primary": "#0d1117",
    "bg_secondary": "#161b22",
    "bg_card": "#1c2128",
    "border": "#30363d",
    "text_primary": "#e6edf3",
    "text_secondary": "#8b949e",
    "text_muted": "#6e7681",
    "accent_blue": "#58a6ff",
    "accent_cyan": "#39c5cf",
    "accent_green": "#3fb950",
    "accent_red": "#f85149",
    "accent_yellow": "#d29922",
}

CSS = """
body {
    background-color: #0d1117 !important;
    color: #e6edf3 !important;
    font-family: 'JetBrains Mono', 'Fira Code', monospace !important;
}
.q-card {
    background-color: #161b22 !important;
    border: 1px solid #30363d !important;
}
.q-header {
    background-color: #161b22 !important;
    border-bottom: 1px solid #30363d !important;
}
.q-btn {
    text-transform: none !important;
}
.q-field__label, .q-field__native {
    color: #e6edf3 !important;
}
.q-field__messages {
    color: #8b949e !important;
}
"""
