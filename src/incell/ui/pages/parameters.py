"""Main page - serial connection, parameter table, import/export and terminal."""

from __future__ import annotations

import io

from nicegui import app, ui

from incell.bridge import Bridge, Canceled
from incell.device.models import DataEvent, ErrorEvent, StatusEvent
from incell.parameters.template import categories, rows_for
from incell.parameters.workbook import (
    SPREADSHEET_EXTENSIONS,
    build_workbook,
    export_filename,
    read_parameters,
)
from incell.settings import BAUD_RATES, DATA_BITS, PARITIES, STOP_BITS
from incell.ui.components.common import (
    card_header,
    card_style,
    notify_outcome,
    set_connected,
    set_disconnected,
)
from incell.ui.layout import page_layout
from incell.ui.theme import COLORS
from incell.utils.logging import get_logger

logger = get_logger(__name__)


def _is_native() -> bool:
    return getattr(app.native, "main_window", None) is not None


def parameters_page(bridge: Bridge, default_baud: int = 115200) -> None:
    """Render the parameter setting page."""

    def content():
        inputs: dict[str, ui.input] = {}

        # Serial connection
        with ui.card().classes("w-full p-4").style(card_style()):
            card_header("Serial Connection", "usb")
            with ui.row().classes("items-end gap-4"):
                port_select = ui.select([], label="Serial Port").classes("w-64")
                baud_select = ui.select(
                    sorted(set(BAUD_RATES) | {default_baud}),
                    value=default_baud,
                    label="Baud Rate",
                ).classes("w-32")
                data_bits_select = ui.select(
                    list(DATA_BITS), value=8, label="Data Bits"
                ).classes("w-24")
                parity_select = ui.select(
                    list(PARITIES), value="none", label="Parity"
                ).classes("w-28")
                stop_bits_select = ui.select(
                    list(STOP_BITS), value=1, label="Stop Bits"
                ).classes("w-24")

                async def refresh_ports():
                    outcome = await bridge.list_ports()
                    if not outcome.success:
                        ui.notify(f"Scan failed: {outcome.error}", type="negative")
                        return
                    devices = [p.device for p in outcome.ports]
                    port_select.options = devices
                    if devices and port_select.value not in devices:
                        port_select.value = devices[0]
                    port_select.update()
                    if not devices:
                        ui.notify("No serial ports found", type="warning")

                ui.button(icon="refresh", on_click=refresh_ports).props("flat").tooltip(
                    "Rescan ports"
                )

            status_label = ui.label("Not connected").classes("text-caption mt-3").style(
                f"color: {COLORS['text_muted']}"
            )

            with ui.row().classes("gap-2 mt-2"):
                async def connect():
                    selected = port_select.value
                    if not selected:
                        ui.notify("Select a serial port first", type="warning")
                        return
                    outcome = await bridge.connect(
                        selected,
                        baud_select.value,
                        data_bits_select.value,
                        parity_select.value,
                        stop_bits_select.value,
                    )
                    if not outcome.success:
                        ui.notify(f"Connection failed: {outcome.error}", type="negative")

                async def disconnect():
                    outcome = await bridge.disconnect()
                    if not outcome.success:
                        ui.notify(f"Disconnect failed: {outcome.error}", type="negative")

                ui.button("Connect", icon="usb", on_click=connect).style(
                    f"background: {COLORS['accent_green']}"
                )
                ui.button("Disconnect", icon="usb_off", on_click=disconnect).props(
                    "flat"
                ).style(f"color: {COLORS['text_secondary']}")

        # Parameters
        with ui.card().classes("w-full p-4 mt-4").style(card_style()):
            card_header("Parameters", "tune")

            def collect() -> dict[str, str]:
                return {name: field.value or "" for name, field in inputs.items()}

            def apply(parameters: dict) -> None:
                for name, value in parameters.items():
                    if name in inputs:
                        inputs[name].value = "" if value is None else str(value)

            with ui.row().classes("items-end gap-4"):
                model_input = ui.input("Model Name").classes("w-64")

                async def import_clicked():
                    if not _is_native():
                        upload_dialog.open()
                        return
                    outcome = await bridge.import_parameters()
                    if isinstance(outcome, Canceled):
                        return
                    if notify_outcome(outcome, "Parameters imported"):
                        apply(outcome.parameters)
                        logger.info("ui_import_applied", file_path=outcome.file_path)

                async def export_clicked():
                    if not _is_native():
                        buffer = io.BytesIO()
                        build_workbook(collect()).save(buffer)
                        ui.download(buffer.getvalue(), export_filename(model_input.value))
                        return
                    outcome = await bridge.export_parameters(collect(), model_input.value)
                    if isinstance(outcome, Canceled):
                        return
                    notify_outcome(outcome, "Parameters exported")

                ui.button("Import", icon="file_open", on_click=import_clicked).style(
                    f"background: {COLORS['accent_blue']}"
                )
                ui.button("Export", icon="save", on_click=export_clicked).style(
                    f"background: {COLORS['accent_blue']}"
                )

            for category in categories():
                with ui.expansion(category, value=True).classes("w-full mt-2"):
                    with ui.grid(columns=4).classes("w-full gap-3"):
                        for row in rows_for(category):
                            inputs[row.name] = ui.input(row.name).props(
                                f'hint="{row.value_range}" dense'
                            )

            # Browser sessions have no native picker: upload instead
            with ui.dialog() as upload_dialog, ui.card():
                ui.label("Import parameter workbook").classes("text-subtitle2")

                def uploaded(e):
                    try:
                        parameters = read_parameters(io.BytesIO(e.content.read()))
                    except Exception as exc:
                        ui.notify(f"Failed: {exc}", type="negative")
                        return
                    apply(parameters)
                    upload_dialog.close()
                    ui.notify("Parameters imported", type="positive")

                ui.upload(
                    on_upload=uploaded,
                    auto_upload=True,
                    max_files=1,
                ).props(f'accept="{",".join(SPREADSHEET_EXTENSIONS)}"')

        # Terminal
        with ui.card().classes("w-full p-4 mt-4").style(card_style()):
            card_header("Terminal", "terminal")
            log = ui.log(max_lines=1000).classes("w-full h-48")
            with ui.row().classes("w-full items-end gap-2"):
                payload_input = ui.input("Send").classes("flex-grow")
                line_ending = ui.select(
                    {"": "None", "\n": "LF", "\r\n": "CR+LF"}, value="\r\n", label="EOL"
                ).classes("w-28")

                async def send():
                    text = (payload_input.value or "") + line_ending.value
                    if not text:
                        return
                    outcome = await bridge.send(text)
                    if outcome.success:
                        log.push(f">> {payload_input.value}")
                        payload_input.value = ""
                    else:
                        ui.notify(f"Send failed: {outcome.error}", type="negative")

                payload_input.on("keydown.enter", send)
                ui.button("Send", icon="send", on_click=send).style(
                    f"background: {COLORS['accent_green']}"
                )
                ui.button("Clear", icon="delete", on_click=log.clear).props("flat")

        # Events pushed from the connection manager
        subscription = bridge.subscribe()

        def pump_events():
            for event in subscription.drain():
                if isinstance(event, StatusEvent):
                    if event.connected:
                        set_connected(status_label, event.port, event.baud_rate)
                    else:
                        set_disconnected(status_label)
                elif isinstance(event, DataEvent):
                    log.push(event.data.rstrip("\r\n"))
                elif isinstance(event, ErrorEvent):
                    log.push(f"!! {event.message}")
                    ui.notify(f"Serial error: {event.message}", type="negative")

        ui.timer(0.1, pump_events)
        ui.context.client.on_disconnect(subscription.close)

        settings = bridge.manager.settings
        if bridge.manager.is_connected and settings is not None:
            set_connected(status_label, settings.path, settings.baud_rate)
        ui.timer(0.1, refresh_ports, once=True)

    page_layout(content)
