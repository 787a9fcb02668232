"""Error boundary handling for the pr-train command.

Domain errors are shown as clean messages and mapped to their exit codes.
Failures from git or gh that escaped classification get the generic report.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import click

from prtrain.cli.output import user_output
from prtrain.core.errors import PrTrainError, UserDeclined

F = TypeVar("F", bound=Callable[..., Any])


def cli_error_boundary(func: F) -> F:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - UserDeclined: farewell message, exit 0
        - PrTrainError: "Error: <message>" plus hint, exit with the error's code
        - RuntimeError: generic "was there a conflict" report with details, exit 1

    All other exceptions bubble up normally with full stack traces.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except UserDeclined:
            user_output("No worries. Bye now. 👋")
            raise SystemExit(0) from None
        except PrTrainError as e:
            user_output(click.style("Error: ", fg="red") + e.message)
            if e.hint:
                user_output(e.hint)
            raise SystemExit(e.exit_code) from None
        except RuntimeError as e:
            message = "❌ An error occurred. Was there a conflict perhaps?"
            user_output(click.style(message, fg="red"))
            user_output(str(e))
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
