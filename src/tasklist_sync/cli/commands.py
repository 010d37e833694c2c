# src/tasklist_sync/cli/commands.py

from __future__ import annotations

import getpass
import logging
from collections.abc import Awaitable, Callable

from ..core.certs import fingerprint, get_certificate
from ..core.client import OVERWRITE_VERSION
from ..core.errors import HttpError
from ..core.state import AppState
from .bootstrap import clear_token, save_token

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple command registry used by the CLI (tasksync help, tasksync sync, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, argv: list[str]) -> str:
        """
        Run the command named by argv[0] with the remaining arguments.
        Returns the text to print.
        """
        if not argv:
            return self.build_help()

        name = argv[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: {name}. Use 'tasksync help' to list available commands."

        return await handler(state, argv[1:])

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    config = state.client.config
    session = "logged in" if config.token else "not logged in"
    encryption = "ON" if config.encryption_key else "OFF"
    local = len(state.task_store.load())
    return (
        "Status:\n"
        f"  Server: {config.server} ({session})\n"
        f"  Encryption: {encryption}\n"
        f"  Max retries on conflict: {config.max_retries or 0}\n"
        f"  Local tasks: {local} ({state.settings.tasks_path})"
    )


async def cmd_login(state: AppState, args: list[str]) -> str:
    """
    login             -> prompt for the password
    login <password>  -> use the given password
    """
    password = args[0] if args else getpass.getpass("Password: ")
    try:
        await state.client.login(password)
    except HttpError:
        clear_token(state.settings.token_path)
        raise
    token = state.client.config.token
    if token:
        save_token(state.settings.token_path, token)
    return f"Logged in to {state.client.config.server}."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    try:
        await state.client.logout()
    finally:
        clear_token(state.settings.token_path)
    return "Logged out."


async def cmd_download(state: AppState, args: list[str]) -> str:
    """Replace the local task list with the server copy."""
    result = await state.client.download()
    state.task_store.save(result.data)
    return f"Downloaded {len(result.data)} tasks (version {result.version})."


async def cmd_upload(state: AppState, args: list[str]) -> str:
    """Overwrite the server copy with the local task list."""
    tasks = state.task_store.load()
    await state.client.upload(tasks, OVERWRITE_VERSION)
    return f"Uploaded {len(tasks)} tasks (server copy overwritten)."


async def cmd_sync(state: AppState, args: list[str]) -> str:
    local = state.task_store.load()
    result = await state.client.sync(local)
    state.task_store.save(result.data)
    return (
        f"Synced {len(result.data)} tasks.\n"
        f"  Local changes:  {result.diff.client}\n"
        f"  Server changes: {result.diff.server}"
    )


async def cmd_delete(state: AppState, args: list[str]) -> str:
    await state.client.delete()
    return "Deleted the task list on the server."


async def cmd_cert(state: AppState, args: list[str]) -> str:
    """
    cert           -> certificate of the configured server
    cert <url>     -> certificate of another server
    """
    server = args[0] if args else state.client.config.server
    pem = await get_certificate(server)
    if pem is None:
        return f"No certificate available for {server}."
    return f"SHA-256 fingerprint: {fingerprint(pem)}\n{pem}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show server, session and local task list.")
registry.register("login", cmd_login, help_text="Log in and store the session token: login [password].")
registry.register("logout", cmd_logout, help_text="Log out and forget the session token.")
registry.register("download", cmd_download, help_text="Replace local tasks with the server copy.")
registry.register("upload", cmd_upload, help_text="Overwrite the server copy with local tasks.")
registry.register("sync", cmd_sync, help_text="Merge local and server tasks and store the result.")
registry.register("delete", cmd_delete, help_text="Delete the task list on the server.")
registry.register("cert", cmd_cert, help_text="Show the server TLS certificate: cert [url].")
