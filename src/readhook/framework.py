"""Hook-first readhook framework runtime."""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Any

import pluggy
from loguru import logger

from readhook.config import Settings, get_settings
from readhook.errors import PluginLoadError
from readhook.hook_runtime import HookRuntime
from readhook.hookspecs import READHOOK_NAMESPACE, ReadHookSpecs
from readhook.registry import HandlerRegistry, Rejection
from readhook.service import ApplicationService
from readhook.store import MemoryStore, bookshop_store
from readhook.types import ReadRequest, ResponseEnvelope

BUILTIN_PLUGINS = (
    "readhook.builtin.catalog:plugin",
    "readhook.builtin.orders:plugin",
    "readhook.builtin.cli:plugin",
)


@dataclass(frozen=True)
class LoadedPlugin:
    """Registration result for one plugin."""

    name: str
    source: str


class ReadHookFramework:
    """Minimal host runtime. Entity behavior grows from plugins."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._plugin_manager = pluggy.PluginManager(READHOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(ReadHookSpecs)
        self._hook_runtime = HookRuntime(self._plugin_manager)
        self._loaded_plugins: list[LoadedPlugin] = []
        self._failed_plugins: dict[str, str] = {}
        self._service: ApplicationService | None = None
        self._rejections: set[Rejection] = set()

    @property
    def loaded_plugins(self) -> list[LoadedPlugin]:
        return list(self._loaded_plugins)

    @property
    def failed_plugins(self) -> dict[str, str]:
        return dict(self._failed_plugins)

    def load_plugins(self) -> None:
        """Register builtin, entry point and configured plugins."""

        self._loaded_plugins = []
        self._failed_plugins = {}
        self._invalidate_service()

        for spec in BUILTIN_PLUGINS:
            self._register_spec(spec, source="builtin")

        if self.settings.load_entrypoints:
            before = {name for name, _ in self._plugin_manager.list_name_plugin()}
            try:
                self._plugin_manager.load_setuptools_entrypoints(READHOOK_NAMESPACE)
            except Exception as exc:
                self._failed_plugins["entrypoints"] = str(exc)
                logger.opt(exception=True).warning("plugin.entrypoints_failed group={}", READHOOK_NAMESPACE)
            for name, _ in self._plugin_manager.list_name_plugin():
                if name not in before:
                    self._loaded_plugins.append(LoadedPlugin(name=name, source="entrypoint"))

        for spec in self.settings.plugins:
            self._register_spec(spec, source="config")

    def register_plugin(self, plugin: object, *, name: str | None = None) -> None:
        """Register an already-built plugin object."""

        plugin_name = self._plugin_manager.register(plugin, name=name)
        self._loaded_plugins.append(LoadedPlugin(name=plugin_name or repr(plugin), source="direct"))
        self._invalidate_service()

    def reject(self, operation: str, entity: str) -> None:
        """Refuse ``operation`` on ``entity``; kept across service rebuilds."""

        self.service.reject(operation, entity)

    def create_store(self) -> MemoryStore:
        """Create the data store from hooks; fallback to settings or bundled sample data."""

        provided = self._hook_runtime.call_first("provide_store", settings=self.settings)
        if isinstance(provided, MemoryStore):
            return provided
        if self.settings.data_file is not None:
            return MemoryStore.from_yaml(self.settings.data_file)
        return bookshop_store()

    def build_service(self) -> ApplicationService:
        """Populate a fresh handler registry from plugins and wrap it in a service."""

        store = self.create_store()
        registry = HandlerRegistry()
        for rejection in self._rejections:
            registry.reject(rejection.operation, rejection.entity, service=rejection.service)
        self._hook_runtime.call_many("register_handlers", registry=registry, store=store, settings=self.settings)
        logger.debug(
            "service.ready name={} bindings={} entities={}",
            self.settings.service_name,
            len(registry.bindings),
            ",".join(store.entities),
        )
        return ApplicationService(self.settings.service_name, registry, on_error=self._notify_error)

    @property
    def service(self) -> ApplicationService:
        if self._service is None:
            self._service = self.build_service()
        return self._service

    def read(self, request: ReadRequest | str) -> ResponseEnvelope:
        """Serve one READ through the current service."""

        return self.service.read(request)

    def register_cli_commands(self, app: Any) -> None:
        """Ask plugins to register CLI commands."""

        self._hook_runtime.call_many("register_cli_commands", app=app)

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        return self._hook_runtime.hook_report()

    def _invalidate_service(self) -> None:
        if self._service is not None:
            self._rejections.update(self._service.registry.rejections)
        self._service = None

    def _notify_error(self, stage: str, error: Exception, request: ReadRequest) -> None:
        self._hook_runtime.notify_error(stage=stage, error=error, request=request)

    def _register_spec(self, spec: str, *, source: str) -> None:
        if self._plugin_manager.has_plugin(spec):
            self._loaded_plugins.append(LoadedPlugin(name=spec, source=source))
            return
        try:
            plugin = load_plugin_object(spec)
            self._plugin_manager.register(plugin, name=spec)
            self._loaded_plugins.append(LoadedPlugin(name=spec, source=source))
        except Exception as exc:
            self._failed_plugins[spec] = str(exc)
            logger.opt(exception=True).warning("plugin.load_failed plugin={} source={}", spec, source)


def load_plugin_object(spec: str) -> object:
    """Resolve a ``module:attribute`` spec to a plugin object."""

    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise PluginLoadError(spec, "expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise PluginLoadError(spec, str(exc)) from exc
    plugin = getattr(module, attr, None)
    if plugin is None:
        raise PluginLoadError(spec, f"module '{module_name}' has no attribute '{attr}'")
    return plugin
