"""Build the integration the commands operate on."""

import functools
import sys
from typing import Any, Callable, TypeVar

from unity_vscode.cli.utils.config import CLIConfig, get_config
from unity_vscode.core.errors import IntegrationError
from unity_vscode.services.integration import VSCodeIntegration
from unity_vscode.services.preferences import JsonFilePreferenceStore

F = TypeVar("F", bound=Callable[..., Any])


def get_integration(config: CLIConfig | None = None) -> VSCodeIntegration:
    cfg = config or get_config()
    store = JsonFilePreferenceStore(cfg.resolved_prefs_path())
    return VSCodeIntegration(store, cfg.project, config=cfg.integration)


def handle_integration_errors(func: F) -> F:
    """Decorator that handles IntegrationError consistently.

    Prints the error and exits with code 1 instead of showing a traceback.
    """
    from unity_vscode.cli.utils.output import print_error

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except IntegrationError as e:
            print_error(str(e))
            sys.exit(1)

    return wrapper  # type: ignore[return-value]
