"""FastAPI application exposing a widget's display model and configuration."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .i18n import StringTable
from .model import FONT_SIZE_CHOICES, DisplayModel
from .sources import SourceRegistry, StaticSource
from .states import State
from .store import WidgetStore
from .template import PLACEHOLDERS
from .version import APP_VERSION, SCHEMA_VERSION

DEFAULT_CONFIG_PATH = Path(os.environ.get("TRISTATE_CONFIG", "data/widget.json"))


class ThresholdsPayload(BaseModel):
    down: float
    up: float


class TitlePayload(BaseModel):
    show: bool | None = None
    text: str | None = None
    use_custom_colour: bool | None = None
    background: tuple[int, int, int] | str | None = None
    foreground: tuple[int, int, int] | str | None = None


class StateStylePayload(BaseModel):
    text: str | None = None
    background: tuple[int, int, int] | str | None = None
    foreground: tuple[int, int, int] | str | None = None


class DisplayPayload(BaseModel):
    font_size_index: int | None = Field(default=None, ge=1, le=6)
    debug_mode: bool | None = None


class SourceSelectionPayload(BaseModel):
    source: str | None = None


class SourceValuePayload(BaseModel):
    value: float


class LocalePayload(BaseModel):
    locale: str


def _parse_state(name: str) -> State:
    try:
        return State[name.upper()]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown state: {name}") from exc


def create_app(
    config_path: Path | str = DEFAULT_CONFIG_PATH,
    *,
    sources: SourceRegistry | None = None,
    localizer: StringTable | None = None,
) -> FastAPI:
    app = FastAPI(title="TriState", version=APP_VERSION)

    logger = logging.getLogger(__name__)

    localizer = localizer if localizer is not None else StringTable()
    sources = sources if sources is not None else SourceRegistry()
    try:
        store = WidgetStore(Path(config_path), translate=localizer.translate)
    except RuntimeError:
        logger.exception("Failed to load widget configuration from %s", config_path)
        raise
    model = DisplayModel(store.config, sources=sources, localizer=localizer, number=1)

    app.state.widget_store = store
    app.state.display_model = model
    app.state.sources = sources

    def _config_payload() -> dict[str, object]:
        payload = store.snapshot()
        payload["schema_version"] = SCHEMA_VERSION
        payload["threshold_bounds"] = list(model.threshold_bounds())
        payload["font_sizes"] = [{"label": label, "index": index} for label, index in FONT_SIZE_CHOICES]
        return payload

    def _get_static_source(name: str) -> StaticSource:
        source = sources.get(name)
        if source is None:
            raise HTTPException(status_code=404, detail=f"Unknown source: {name}")
        if not isinstance(source, StaticSource):
            raise HTTPException(status_code=400, detail=f"Source {name} is read-only")
        return source

    @app.get("/api/widget")
    async def get_widget() -> dict[str, object]:
        changed = model.wakeup()
        payload = model.snapshot()
        payload["changed"] = changed
        return payload

    @app.get("/api/widget/paint")
    async def get_paint_plan(width: int = 240, height: int = 120) -> dict[str, object]:
        if width <= 0 or height <= 0:
            raise HTTPException(status_code=400, detail="Widget size must be positive")
        return model.paint(width, height).to_dict()

    @app.get("/api/widget/menu")
    async def get_menu() -> dict[str, object]:
        return {"entries": [label for label, _ in model.menu()]}

    @app.get("/api/config")
    async def get_config() -> dict[str, object]:
        return _config_payload()

    @app.post("/api/config/thresholds")
    async def update_thresholds(payload: ThresholdsPayload) -> dict[str, object]:
        try:
            store.set_thresholds(payload.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload()

    @app.post("/api/config/title")
    async def update_title(payload: TitlePayload) -> dict[str, object]:
        try:
            store.set_title(payload.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload()

    @app.post("/api/config/states/{state_name}")
    async def update_state_style(state_name: str, payload: StateStylePayload) -> dict[str, object]:
        state = _parse_state(state_name)
        try:
            store.set_state_style(state, payload.model_dump())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload()

    @app.post("/api/config/display")
    async def update_display(payload: DisplayPayload) -> dict[str, object]:
        try:
            if payload.font_size_index is not None:
                store.set_font_size_index(payload.font_size_index)
            if payload.debug_mode is not None:
                store.set_debug_mode(payload.debug_mode)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload()

    @app.post("/api/config/source")
    async def update_source(payload: SourceSelectionPayload) -> dict[str, object]:
        if payload.source is not None and payload.source not in sources:
            raise HTTPException(status_code=404, detail=f"Unknown source: {payload.source}")
        try:
            store.set_source(payload.source)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        logger.info("Widget bound to source %r", payload.source)
        return _config_payload()

    @app.post("/api/config/locale")
    async def update_locale(payload: LocalePayload) -> dict[str, object]:
        localizer.locale = payload.locale
        return {"locale": localizer.locale}

    @app.get("/api/sources")
    async def list_sources() -> dict[str, object]:
        entries = []
        for source in sources:
            if isinstance(source, StaticSource):
                entries.append(source.to_dict())
            else:
                entries.append({"name": source.name(), "exists": source.exists()})
        return {"sources": entries}

    @app.post("/api/sources/{name}")
    async def update_source_value(name: str, payload: SourceValuePayload) -> dict[str, object]:
        source = _get_static_source(name)
        try:
            source.set_value(payload.value)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return source.to_dict()

    @app.post("/api/sources/{name}/reset")
    async def reset_source(name: str) -> dict[str, object]:
        source = _get_static_source(name)
        source.reset()
        return source.to_dict()

    @app.get("/api/placeholders")
    async def get_placeholders() -> dict[str, object]:
        return {
            "placeholders": [
                {"token": token, "label": localizer.translate(key)} for key, token in PLACEHOLDERS
            ]
        }

    return app


__all__ = ["create_app", "DEFAULT_CONFIG_PATH"]
