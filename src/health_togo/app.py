"""App Kivy: una pantalla parametrizada por métrica, con resumen y exportación."""

from __future__ import annotations

import asyncio
import logging
import traceback
from collections.abc import Coroutine
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any

from health_togo.controller import (
    BLOOD_PRESSURE,
    SCREENS,
    MetricController,
    controller_for,
)
from health_togo.errors import PremiumRequired
from health_togo.fetch import RangeFetcher
from health_togo.metrics import descriptor
from health_togo.model import DateRange
from health_togo.render import render_lines
from health_togo.sources.json_export import ExportPaths, JsonExportStore
from health_togo.storage import AppConfig, SQLiteConfigStore

logger = logging.getLogger(__name__)


def run_app() -> int:
    """Lanza la app Kivy."""
    from kivy.app import App
    from kivy.core.window import Window
    from kivy.resources import resource_find
    from kivy.uix.boxlayout import BoxLayout
    from kivy.uix.button import Button
    from kivy.uix.checkbox import CheckBox
    from kivy.uix.label import Label
    from kivy.uix.popup import Popup
    from kivy.uix.spinner import Spinner
    from kivy.uix.textinput import TextInput

    class HealthToGoApp(App):
        """Main Kivy app."""

        def __init__(self, **kwargs: object) -> None:
            super().__init__(**kwargs)
            self.config_store = SQLiteConfigStore(Path.cwd() / "health_togo.sqlite3")
            self.app_config = self.config_store.load_config()
            self.store = JsonExportStore(ExportPaths(root=Path(".")))
            self.controllers: dict[str, MetricController] = {}
            self.screen = SCREENS[0]
            self.status: Label | None = None
            self.preview: TextInput | None = None
            self.all_time: CheckBox | None = None
            self.start_input: TextInput | None = None
            self.end_input: TextInput | None = None
            self._preview_font = resource_find("data/fonts/RobotoMono-Regular.ttf")

        def build(self) -> BoxLayout:
            Window.bind(on_key_down=self._on_key_down)

            root = BoxLayout(orientation="vertical", spacing=8, padding=10)
            root.add_widget(
                Label(
                    text="Health ToGo: elegir métrica y rango, luego Cargar.",
                    size_hint_y=None,
                    height=36,
                )
            )

            titles = {screen_title(key): key for key in SCREENS}
            metric_row = BoxLayout(
                orientation="horizontal", size_hint_y=None, height=40
            )
            spinner = Spinner(text=screen_title(self.screen), values=list(titles))
            spinner.bind(text=lambda _w, text: self._select_screen(titles[text]))
            metric_row.add_widget(spinner)
            self.all_time = CheckBox(active=False, size_hint_x=0.1)
            metric_row.add_widget(self.all_time)
            metric_row.add_widget(Label(text="Todo el historial", size_hint_x=0.3))
            root.add_widget(metric_row)

            default_range = DateRange.last_days(self.app_config.default_days)
            range_row = BoxLayout(orientation="horizontal", size_hint_y=None, height=36)
            range_row.add_widget(Label(text="Desde", size_hint_x=0.15))
            self.start_input = TextInput(
                text=default_range.start.isoformat(), multiline=False
            )
            range_row.add_widget(self.start_input)
            range_row.add_widget(Label(text="Hasta", size_hint_x=0.15))
            self.end_input = TextInput(
                text=default_range.end.isoformat(), multiline=False
            )
            range_row.add_widget(self.end_input)
            root.add_widget(range_row)

            actions = BoxLayout(
                orientation="horizontal",
                spacing=8,
                size_hint_y=None,
                height=40,
            )
            settings_btn = Button(text="Configuracion")
            load_btn = Button(text="Cargar")
            export_btn = Button(text="Exportar CSV")
            exit_btn = Button(text="Salir")
            settings_btn.bind(on_press=self._open_config_popup)
            load_btn.bind(on_press=self._on_load)
            export_btn.bind(on_press=self._on_export)
            exit_btn.bind(on_press=lambda *_args: self.stop())
            for btn in (settings_btn, load_btn, export_btn, exit_btn):
                actions.add_widget(btn)
            root.add_widget(actions)

            self.status = Label(text="Sin datos", size_hint_y=None, height=30)
            root.add_widget(self.status)

            self.preview = TextInput(
                readonly=True,
                text="",
                multiline=True,
                do_wrap=False,
            )
            if self._preview_font:
                self.preview.font_name = self._preview_font
            root.add_widget(self.preview)

            self._load_source()
            return root

        def _on_key_down(
            self,
            _window: object,
            keycode: int,
            _scancode: int,
            _text: str,
            _modifiers: list[str],
        ) -> bool:
            # Esc: salir de fullscreen o cerrar app.
            if keycode != 27:
                return False
            if Window.fullscreen:
                Window.fullscreen = False
            else:
                self.stop()
            return True

        @property
        def controller(self) -> MetricController:
            if self.screen not in self.controllers:
                self.controllers[self.screen] = controller_for(
                    self.screen, RangeFetcher(self.store), self.app_config
                )
            return self.controllers[self.screen]

        def _load_source(self) -> None:
            if not self.app_config.source_dir:
                self._set_status("Configurar carpeta de exportación de salud.")
                return
            store = JsonExportStore(
                ExportPaths(root=Path(self.app_config.source_dir).expanduser())
            )
            try:
                store.validate()
                export_file = store.newest_export()
                count = store.load_export(export_file)
            except (OSError, ValueError) as exc:
                self._show_error("leer exportación", exc)
                return
            self.store = store
            self.controllers.clear()
            self._set_status(f"{count} muestras cargadas de {export_file.name}")

        def _select_screen(self, screen: str) -> None:
            self.screen = screen
            self._refresh_preview()

        def _on_load(self, _: object) -> None:
            if self.all_time is None or self.start_input is None:
                return
            if self.end_input is None:
                return
            try:
                date_range = parse_range(
                    self.all_time.active,
                    self.start_input.text,
                    self.end_input.text,
                )
            except ValueError as exc:
                self._set_status(f"Fecha inválida: {exc}")
                return
            self._schedule(self.controller.change_range(date_range))

        def _on_export(self, _: object) -> None:
            try:
                out_path = self.controller.export_csv()
            except PremiumRequired as exc:
                self._set_status(str(exc))
                return
            except OSError as exc:
                self._show_error("exportar", exc)
                return
            self._set_status(f"CSV generado: {out_path}")

        def _schedule(self, coro: Coroutine[Any, Any, bool]) -> None:
            task = asyncio.ensure_future(coro)
            task.add_done_callback(self._on_task_done)
            self._set_status("Cargando...")

        def _on_task_done(self, task: asyncio.Future[bool]) -> None:
            if task.cancelled():
                return
            exc = task.exception()
            if isinstance(exc, PremiumRequired):
                self._set_status(str(exc))
                return
            if exc is not None:
                self._show_error("cargar", exc)
                return
            if not task.result():
                self._set_status("Ya hay una carga en curso.")
                return
            self._set_status(self.controller.state.status_text)
            self._refresh_preview()

        def _refresh_preview(self) -> None:
            if self.preview is None:
                return
            self.preview.text = "\n".join(render_lines(self.controller))

        def _open_config_popup(self, _: object) -> None:
            inputs: dict[str, TextInput] = {}
            content = BoxLayout(orientation="vertical", spacing=8, padding=8)

            def make_row(label: str, key: str, initial: str) -> BoxLayout:
                row = BoxLayout(orientation="horizontal", size_hint_y=None, height=36)
                row.add_widget(Label(text=label, size_hint_x=0.35))
                inp = TextInput(text=initial, multiline=False)
                row.add_widget(inp)
                inputs[key] = inp
                return row

            content.add_widget(
                make_row(
                    "Carpeta exportación", "source_dir", self.app_config.source_dir
                )
            )
            content.add_widget(
                make_row("Carpeta CSV", "export_dir", self.app_config.export_dir)
            )
            content.add_widget(
                make_row(
                    "Días por defecto",
                    "default_days",
                    str(self.app_config.default_days),
                )
            )
            premium_row = BoxLayout(
                orientation="horizontal", size_hint_y=None, height=36
            )
            premium = CheckBox(active=self.app_config.is_premium, size_hint_x=0.15)
            premium_row.add_widget(premium)
            premium_row.add_widget(Label(text="Premium"))
            content.add_widget(premium_row)

            footer = BoxLayout(orientation="horizontal", size_hint_y=None, height=42)
            cancel_btn = Button(text="Cancelar")
            save_btn = Button(text="Guardar")
            footer.add_widget(cancel_btn)
            footer.add_widget(save_btn)
            content.add_widget(footer)

            popup = Popup(title="Configuracion", content=content, size_hint=(0.9, 0.7))
            cancel_btn.bind(on_press=lambda *_args: popup.dismiss())
            save_btn.bind(
                on_press=lambda *_args: self._save_popup_config(
                    popup, inputs, premium.active
                )
            )
            popup.open()

        def _save_popup_config(
            self,
            popup: Popup,
            inputs: dict[str, TextInput],
            is_premium: bool,
        ) -> None:
            self.app_config = config_from_form(
                self.app_config,
                source_dir=inputs["source_dir"].text,
                export_dir=inputs["export_dir"].text,
                default_days=inputs["default_days"].text,
                is_premium=is_premium,
            )
            self.config_store.save_config(self.app_config)
            popup.dismiss()
            self.controllers.clear()
            self._load_source()

        def _set_status(self, text: str) -> None:
            if self.status is not None:
                self.status.text = text

        def _show_error(self, action: str, exc: BaseException) -> None:
            logger.error("Error al %s", action, exc_info=exc)
            self._set_status(f"Error al {action} ({type(exc).__name__}): {exc}")
            if self.preview is not None:
                self.preview.text = "".join(traceback.format_exception(exc))

    asyncio.run(HealthToGoApp().async_run(async_lib="asyncio"))
    return 0


def screen_title(screen: str) -> str:
    """Menu title of a screen key."""
    if screen == BLOOD_PRESSURE:
        return "Blood Pressure"
    return descriptor(screen).title


def parse_range(
    all_time: bool, start_text: str, end_text: str, today: date | None = None
) -> DateRange:
    """Date range from the form fields (ISO dates; empty end means today).

    Raises:
        ValueError: If a date is malformed or start is after end.
    """
    if all_time:
        return DateRange.all_time(today=today)
    end = date.fromisoformat(end_text.strip()) if end_text.strip() else None
    return DateRange.bounded(
        date.fromisoformat(start_text.strip()), end or today or date.today()
    )


def config_from_form(
    current: AppConfig,
    *,
    source_dir: str,
    export_dir: str,
    default_days: str,
    is_premium: bool,
) -> AppConfig:
    """Apply the settings form to ``current``; bad day counts keep the old one."""
    try:
        days = int(default_days.strip())
    except ValueError:
        days = current.default_days
    return replace(
        current,
        source_dir=source_dir.strip(),
        export_dir=export_dir.strip(),
        default_days=days if days > 0 else current.default_days,
        is_premium=is_premium,
    )
