from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SUBJECT_CLASSES = [
    "Illuminate\\Support\\Facades\\Event",
    "Event",
]

DEFAULT_DISPATCH_METHODS = [
    "dispatch",
    "dispatchIf",
    "dispatchUnless",
    "dispatchSync",
    "dispatchAfterResponse",
]

LARAVEL_NAMESPACE = "Illuminate\\"


class Settings(BaseSettings):
    """Diagram and scanning settings, loaded from EVENT_VISUALIZER_* variables or a .env file.

    None of this reaches the resolver: the CLI turns it into explicit
    (subject class, method) queries and rendering options.
    """

    model_config = SettingsConfigDict(
        env_prefix="EVENT_VISUALIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    theme_event_color: str = "#55efc4"
    theme_listener_color: str = "#74b9ff"
    theme_job_color: str = "#ffeaa7"

    show_laravel_events: bool = False
    classes_to_ignore: list[str] = Field(default_factory=list)

    subject_classes: list[str] = Field(default_factory=lambda: list(DEFAULT_SUBJECT_CLASSES))
    dispatch_methods: list[str] = Field(default_factory=lambda: list(DEFAULT_DISPATCH_METHODS))

    # directory mode: also query every class declared in the scanned tree (jobs)
    detect_jobs: bool = True
