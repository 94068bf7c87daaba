"""switchboard command-line entry point."""

from __future__ import annotations

import asyncio
import sys
from typing import cast

from loguru import logger

from switchboard.cli.history import HistoryManager
from switchboard.cli.reader import DEFAULT_PROMPT, CommandPathCompleter, LineReader
from switchboard.cli.registry import CommandContext, TyperCommandExecutor, TyperCommandRegistry
from switchboard.cli.render import Renderer
from switchboard.cli.session import InputReader, InteractiveSession
from switchboard.cli.state import SessionState
from switchboard.config import Settings, load_settings
from switchboard.core.dispatch import Dispatcher
from switchboard.core.matcher import MatchPolicy
from switchboard.core.resolver import CommandResolver
from switchboard.errors import ResolutionMissError, SwitchboardError, UsageError
from switchboard.framework import SwitchboardFramework
from switchboard.logging_utils import configure_logging


def build_dispatcher(
    settings: Settings,
    renderer: Renderer,
    *,
    interactive: bool,
    framework: SwitchboardFramework | None = None,
) -> Dispatcher:
    """Assemble registry, executor and resolver from the loaded plugins."""

    if framework is None:
        framework = SwitchboardFramework(settings.bin_name)
        framework.load_plugins()

    app = framework.build_app()
    registry = TyperCommandRegistry(app, aliases=framework.command_aliases())
    context = CommandContext(registry=registry, settings=settings, interactive=interactive)
    executor = TyperCommandExecutor(registry, prog_name=settings.bin_name, obj=context)
    policy = MatchPolicy(ratio=settings.match_ratio, min_distance=settings.match_min_distance)
    return Dispatcher(
        registry,
        executor,
        CommandResolver(registry, policy),
        renderer,
        bin_name=settings.bin_name,
        interactive=interactive,
        confirm_suggestions=not settings.skip_confirmation,
    )


def run_single(
    argv: list[str],
    settings: Settings,
    renderer: Renderer,
    *,
    framework: SwitchboardFramework | None = None,
) -> int:
    """Dispatch one argument vector and return the process exit code."""

    dispatcher = build_dispatcher(settings, renderer, interactive=False, framework=framework)
    try:
        asyncio.run(dispatcher.dispatch(argv))
    except ResolutionMissError as exc:
        renderer.error(exc.message)
        return exc.exit_code
    except UsageError as exc:
        renderer.usage_error(exc.message, exc.usage)
        return exc.exit_code
    except SwitchboardError as exc:
        renderer.error(str(exc))
        return exc.exit_code
    return 0


def run_interactive(
    settings: Settings,
    renderer: Renderer | None = None,
    *,
    framework: SwitchboardFramework | None = None,
    reader: InputReader | None = None,
) -> int:
    """Run the interactive session until the user leaves it."""

    renderer = renderer or Renderer()
    dispatcher = build_dispatcher(settings, renderer, interactive=True, framework=framework)
    history = HistoryManager(settings.history_file, settings.history_max_entries)
    if reader is None:
        registry = cast(TyperCommandRegistry, dispatcher.registry)
        reader = LineReader(
            DEFAULT_PROMPT.replace("switchboard", settings.bin_name, 1),
            history=history.prompt_history(),
            completer=CommandPathCompleter(registry),
        )
    session = InteractiveSession(
        dispatcher,
        reader,
        renderer,
        state=SessionState(wrapper_mode=settings.wrapper_mode),
        history=history,
        bin_name=settings.bin_name,
        suppress_welcome=settings.suppress_welcome,
    )
    return asyncio.run(session.run())


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    settings = load_settings()
    configure_logging(settings.log_level)
    renderer = Renderer()

    # The session owns SIGINT, so it has to run on the main thread rather than inside the executor.
    if not args or args == ["interactive"]:
        code = run_interactive(settings, renderer)
    else:
        code = run_single(args, settings, renderer)
    logger.debug("cli.exit code={}", code)
    raise SystemExit(code)
