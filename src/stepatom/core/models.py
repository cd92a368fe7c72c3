"""stepatom data models — Pydantic v2.

This module is a leaf: no internal project imports.
All Enum and Model definitions live here.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SkipValidation
from pydantic_settings import BaseSettings, SettingsConfigDict

# ============================================================
# Enums
# ============================================================


class EngineName(StrEnum):
    """Supported page-automation backends."""

    PUPPETEER = "puppeteer"
    PLAYWRIGHT = "playwright"


class SelectorStrategy(StrEnum):
    """Element lookup strategy chosen by selector prefix."""

    XPATH = "xpath"
    CSS = "css"


class LogLevel(StrEnum):
    """Log entry level."""

    RAW = "raw"
    INFO = "info"
    TIMER = "timer"
    ERROR = "error"


class AtomState(StrEnum):
    """Atom run lifecycle state."""

    IDLE = "idle"
    BOUND = "bound"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DONE = "done"


# ============================================================
# Config Models
# ============================================================


class RunnerArgs(BaseSettings):
    """Process-wide runner arguments. Merged from YAML + env var + overrides."""

    model_config = SettingsConfigDict(env_prefix="PPD_")

    log_extend: bool = Field(default=False, description="Verbose logging (env: PPD_LOG_EXTEND)")
    output: str = Field(default="output", description="Base output folder")
    log_width: int = Field(default=120, ge=40, le=1000, description="Terminal width budget")
    log_file_name: str = Field(default="output.log")


class OutputFolders(BaseModel):
    """Per-run output locations."""

    folder: str | None = Field(default=None, description="Run folder name")
    folder_full: str | None = Field(default=None, description="Absolute run folder")


class Envs(BaseModel):
    """Runner environment handle shared by every Atom of a run."""

    args: RunnerArgs = Field(default_factory=RunnerArgs)
    output: OutputFolders = Field(default_factory=OutputFolders)


class BrowserSettings(BaseModel):
    """Browser / automation engine settings of an environment."""

    engine: str = Field(default=EngineName.PLAYWRIGHT.value, description="puppeteer | playwright")
    browser_type: str = Field(default="chromium", description="chromium | firefox | webkit")
    headless: bool = Field(default=True)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)
    timeout_ms: int = Field(default=30000, ge=1000, le=120000)


class Environment(BaseModel):
    """Named test environment."""

    name: str = Field(default="default")
    url: str = Field(default="")
    browser: BrowserSettings = Field(default_factory=BrowserSettings)


# ============================================================
# Log Models
# ============================================================


class LogEntry(BaseModel):
    """Single structured log record handed to the log sink."""

    text: str = Field(default="")
    level: LogLevel = Field(default=LogLevel.RAW)
    level_indent: int = Field(default=0, ge=0)
    extend_info: bool = Field(default=False)
    std_out: bool = Field(default=True)
    screenshot: bool = Field(default=False)
    fullpage: bool = Field(default=False)


LogSink = Callable[[LogEntry], Awaitable[None]]


# ============================================================
# Run Models
# ============================================================


class RunArgs(BaseModel):
    """Invocation argument set of Atom.run_test."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    envs: Envs = Field(default_factory=Envs)
    envs_id: str | None = Field(default=None)
    env_name: str | None = Field(default=None)
    env_page_name: str | None = Field(default=None)
    env: Environment = Field(default_factory=Environment)
    # Caller-owned containers, kept by identity
    data: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    data_test: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    selectors: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    selectors_test: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    options: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    allow_results: SkipValidation[list[str]] = Field(default_factory=list)
    bind_results: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    bind_selectors: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    bind_data: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    level_indent: int = Field(default=0, ge=0)
    repeat: int = Field(default=1, ge=1)
    step_id: str | None = Field(default=None)
    name: str = Field(default="")
    description: str = Field(default="")
    browser: Any = Field(default=None)
    page: Any = Field(default=None)
    socket: Any = Field(default=None)
    log: LogSink
    log_options: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
