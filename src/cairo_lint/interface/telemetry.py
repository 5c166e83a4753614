"""Console telemetry: a rich console paired with a named logger."""

import logging

from rich.console import Console


class ProjectTelemetry:
    """TelemetryPort implementation used by the CLI."""

    def __init__(self, name: str, color: str, welcome: str, console: Console | None = None) -> None:
        self.name = name
        self.color = color
        self.welcome = welcome
        self.console = console or Console()
        self.logger = logging.getLogger(name.lower())

    def handshake(self) -> None:
        self.logger.info("%s: %s", self.name, self.welcome)
        self.console.print(f"[bold {self.color}]{self.name}[/] {self.welcome}", highlight=False)

    def step(self, message: str) -> None:
        self.logger.info(message)
        self.console.print(f"[{self.color}]>>[/] {message}", highlight=False)

    def warning(self, message: str) -> None:
        self.logger.warning(message)
        self.console.print(f"[bold #F9A602]warning:[/] {message}", highlight=False)

    def error(self, message: str) -> None:
        self.logger.error(message)
        self.console.print(f"[bold red]error:[/] {message}", highlight=False)

    def debug(self, message: str) -> None:
        self.logger.debug(message)
