"""ExecutionContext — the isolated namespace a reflected module runs in.

The module is executed in a fresh :class:`types.ModuleType` that is never
registered in :data:`sys.modules`.  Its ``__builtins__`` is a copy of the
host builtins with ``__import__`` replaced by a resolver that:

* resolves relative imports (``from . import x``, ``from .helpers import y``)
  against the module's own directory only;
* resolves a bare name that matches a sibling ``.py`` file locally;
* delegates every other absolute import to the host import system.

Every tool handler reflected from the module closes over this namespace, so
the context, not the descriptor, owns their lifetime.  :meth:`close` clears
the namespace and invalidates all handlers at once.
"""

from __future__ import annotations

import builtins
import logging
import os
import sys
import types
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_MODULE_PREFIX = "mcp_sandbox_module"


class ExecutionContext:
    """Owns the namespace, builtins and sibling-module cache of one session."""

    def __init__(self, module_path: Path | str) -> None:
        self.module_path = Path(module_path).resolve()
        self.module_dir = self.module_path.parent
        self.module_name = f"{_MODULE_PREFIX}_{self.module_path.stem}"
        self._siblings: dict[str, types.ModuleType] = {}
        self._builtins = self._make_builtins()
        self._module = self._new_module(self.module_name, self.module_path)
        self._loaded = False
        self._closed = False

    @property
    def namespace(self) -> dict[str, Any]:
        """Globals of the loaded module."""
        return self._module.__dict__

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    def load(self) -> None:
        """Compile and execute the module source inside this context.

        Blocking; callers bound it with a deadline.
        """
        if self._closed:
            msg = "Execution context is closed"
            raise RuntimeError(msg)
        source = self.module_path.read_text(encoding="utf-8")
        code = compile(source, str(self.module_path), "exec")
        exec(code, self.namespace)  # noqa: S102
        self._loaded = True
        logger.debug("Loaded %s into context %s", self.module_path, self.module_name)

    def exports(self) -> Any:
        """Return the module's exported value.

        ``__exports__`` wins when defined.  Otherwise the names listed in
        ``__all__``, else every public name the module itself defined.
        """
        ns = self.namespace
        if "__exports__" in ns:
            return ns["__exports__"]
        if "__all__" in ns:
            return {name: ns[name] for name in ns["__all__"] if name in ns}
        return {
            name: value
            for name, value in ns.items()
            if not name.startswith("_") and self._is_own_export(value)
        }

    def close(self) -> None:
        """Drop the module state; every handler from this context is invalid afterwards."""
        if self._closed:
            return
        self._closed = True
        self._module.__dict__.clear()
        for sibling in self._siblings.values():
            sibling.__dict__.clear()
        self._siblings.clear()
        logger.debug("Closed context %s", self.module_name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_own_export(self, value: Any) -> bool:
        if isinstance(value, (types.ModuleType, type)):
            return False
        if not callable(value):
            return True
        owner = getattr(value, "__module__", None)
        if not isinstance(owner, str):
            owner = type(value).__module__
        return owner == self.module_name

    def _make_builtins(self) -> dict[str, Any]:
        seeded = dict(vars(builtins))
        seeded["__import__"] = self._import
        seeded["print"] = print
        return seeded

    def _new_module(self, name: str, path: Path) -> types.ModuleType:
        module = types.ModuleType(name)
        module.__dict__.update(
            {
                "__file__": str(path),
                "__builtins__": self._builtins,
                "__host__": types.SimpleNamespace(
                    env=types.MappingProxyType(dict(os.environ)),
                    version=sys.version,
                    platform=sys.platform,
                ),
            }
        )
        return module

    def _import(
        self,
        name: str,
        globals: dict[str, Any] | None = None,  # noqa: A002
        locals: dict[str, Any] | None = None,  # noqa: A002
        fromlist: tuple[str, ...] | list[str] | None = (),
        level: int = 0,
    ) -> Any:
        if level > 1:
            msg = f"Relative import beyond {self.module_dir} is not permitted"
            raise ImportError(msg)
        if level == 1:
            return self._import_relative(name, fromlist or ())

        head = name.partition(".")[0]
        if self._sibling_path(head) is not None:
            return self._load_sibling(head)
        return builtins.__import__(name, globals, locals, fromlist or (), 0)

    def _import_relative(self, name: str, fromlist: tuple[str, ...] | list[str]) -> Any:
        if name:
            return self._load_sibling(name)
        # ``from . import a, b``
        package = types.SimpleNamespace()
        for item in fromlist:
            setattr(package, item, self._load_sibling(item))
        return package

    def _sibling_path(self, name: str) -> Path | None:
        if not name or "." in name:
            return None
        candidate = self.module_dir / f"{name}.py"
        if candidate.is_file() and candidate != self.module_path:
            return candidate
        return None

    def _load_sibling(self, name: str) -> types.ModuleType:
        cached = self._siblings.get(name)
        if cached is not None:
            return cached

        path = self._sibling_path(name)
        if path is None:
            msg = f"No module named {name!r} in {self.module_dir}"
            raise ImportError(msg, name=name)

        module = self._new_module(f"{self.module_name}.{name}", path)
        self._siblings[name] = module
        try:
            code = compile(path.read_text(encoding="utf-8"), str(path), "exec")
            exec(code, module.__dict__)  # noqa: S102
        except BaseException:
            del self._siblings[name]
            raise
        return module
