"""Module Registry.

Central registry for the screens shown in the sidebar.  The Host Shell
queries this registry after sign-in to populate the sidebar and
configure the module switcher.

Adding a new screen = one ``register()`` call + one view class.
"""

from __future__ import annotations

from typing import Callable

import customtkinter as ctk

from issuelane.logger import StructuredLogger

ModuleFactory = Callable[[ctk.CTkFrame], ctk.CTkFrame]


class ModuleEntry:
    """Metadata for a single registered screen.

    Attributes
    ----------
    module_id:
        Unique string identifier (e.g. ``'tickets'``).
    display_name:
        Human-readable name shown in the sidebar.
    icon:
        Unicode character used as the sidebar icon.
    factory:
        Callable that receives a parent ``CTkFrame`` and returns the
        screen's root frame.  Called lazily on first activation.
    """

    __slots__ = ("module_id", "display_name", "icon", "factory")

    def __init__(
        self,
        module_id: str,
        display_name: str,
        icon: str,
        factory: ModuleFactory,
    ) -> None:
        self.module_id = module_id
        self.display_name = display_name
        self.icon = icon
        self.factory = factory


class ModuleRegistry:
    """Ordered collection of registered screens.

    Parameters
    ----------
    logger:
        Structured logger for registration events.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._entries: dict[str, ModuleEntry] = {}
        self._logger = logger
        self._default_module_id: str = ""

    def register(
        self,
        module_id: str,
        display_name: str,
        icon: str,
        factory: ModuleFactory,
        *,
        default: bool = False,
    ) -> None:
        """Register a screen with the host shell.

        Parameters
        ----------
        module_id:
            Unique identifier for the screen.
        display_name:
            Label shown in the sidebar.
        icon:
            Unicode icon character for the sidebar entry.
        factory:
            Callable ``(parent) -> CTkFrame`` invoked lazily on first use.
        default:
            If ``True``, this screen is activated after sign-in.
        """
        if module_id in self._entries:
            self._logger.warning("Module '%s' already registered; overwriting.", module_id)
        self._entries[module_id] = ModuleEntry(module_id, display_name, icon, factory)
        if default or not self._default_module_id:
            self._default_module_id = module_id
        self._logger.info("Module registered: %s (%s)", module_id, display_name)

    def modules(self) -> list[ModuleEntry]:
        """Registered screens in registration order."""
        return list(self._entries.values())

    def get_module(self, module_id: str) -> ModuleEntry:
        """Return a specific module entry by ID.

        Raises
        ------
        KeyError
            If *module_id* is not registered.
        """
        if module_id not in self._entries:
            raise KeyError(f"Module '{module_id}' is not registered.")
        return self._entries[module_id]

    @property
    def default_module_id(self) -> str:
        """The ``module_id`` to activate after sign-in."""
        return self._default_module_id
