"""Telemetry port backed by logging and typer styled output."""

import logging

import typer

logger = logging.getLogger("kt_array_literal")


class ProjectTelemetry:
    """Announces progress on stderr; mirrors every message to the package logger."""

    def __init__(self, project_name: str, color: str = "cyan", quiet: bool = False) -> None:
        self.project_name = project_name
        self.color = color
        self.quiet = quiet

    def _emit(self, label: str, message: str, color: str) -> None:
        if self.quiet:
            return
        prefix = typer.style(f"[{self.project_name}]", fg=self.color, bold=True)
        typer.echo(f"{prefix} {typer.style(label, fg=color)} {message}", err=True)

    def step(self, message: str) -> None:
        logger.info(message)
        self._emit(">", message, self.color)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self._emit("warning:", message, "yellow")

    def error(self, message: str) -> None:
        logger.error(message)
        self._emit("error:", message, "red")


def configure_logging(verbose: bool = False) -> None:
    """Route package logs to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
