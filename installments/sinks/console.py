"""Console notifier for terminals and development."""

from installments.sinks.base import Notifier


class ConsoleNotifier(Notifier):
    """Print user notifications to stdout and keep a record of them."""

    def __init__(self, quiet: bool = False) -> None:
        """Initialize console notifier.

        Parameters
        ----------
        quiet : bool
            Record messages without printing them.
        """
        self.quiet = quiet
        self.messages: list[tuple[str, str]] = []

    def success(self, contract_number: str) -> None:
        self._emit("success", f"Contract {contract_number} created successfully")

    def error(self, message: str) -> None:
        self._emit("error", message)

    def _emit(self, level: str, message: str) -> None:
        self.messages.append((level, message))
        if not self.quiet:
            print(f"[{level.upper()}] {message}")
