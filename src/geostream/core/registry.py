"""Component registry for GeoStream.

Provides ``Registry[T]``, a small generic dict-like class used to look up
sink implementations by format name.

Design choices
--------------
* **lowercase key normalization** by default (format names are lowercase).
  Configurable via the *normalize* constructor kwarg.
* **``[]`` raises ``KeyError``**, as for a dict.
* **Always stores classes**; the caller instantiates.
* **Lazy imports**: ``add_lazy`` defers importing a sink module until first
  lookup, which keeps ``geostream.core`` free of import cycles.
* **Aliases**: ``alias()`` maps alternate names to a canonical key.
* **Advisory protocol validation**: ``warnings.warn`` on registration when
  a class doesn't expose the methods of the declared interface; never blocks.
"""

from __future__ import annotations

import importlib
import logging
import warnings
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _LazyEntry:
    """Sentinel wrapping an import path for deferred resolution."""

    __slots__ = ("import_path",)

    def __init__(self, import_path: str) -> None:
        self.import_path = import_path

    def resolve(self) -> Any:
        module_path, class_name = self.import_path.rsplit(".", 1)
        module = importlib.import_module(module_path)
        return getattr(module, class_name)


class Registry(Generic[T]):
    """A generic, dict-like registry for GeoStream components.

    Parameters
    ----------
    name : str
        Human-readable name (used in ``__repr__`` and error messages).
    normalize : callable, optional
        Key normalization function.  Defaults to ``str.lower``.
    protocol : type or None, optional
        If given, newly-registered classes are advisory-checked for the
        public methods of this interface.
    """

    def __init__(
        self,
        name: str,
        *,
        normalize: Callable[[str], str] = str.lower,
        protocol: Optional[Type] = None,
    ) -> None:
        self._name = name
        self._normalize = normalize
        self._protocol = protocol
        self._entries: Dict[str, Any] = {}       # key -> class or _LazyEntry
        self._meta: Dict[str, Dict[str, Any]] = {}
        self._aliases: Dict[str, str] = {}        # alias_key -> canonical_key

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(self, key: str, value: T, **meta: Any) -> T:
        """Register *value* under *key* and return it.

        Example::

            R.writers.add("wkt", WktWriter, features=False, result="getvalue_str")
        """
        nkey = self._normalize(key)
        self._validate_protocol(value, nkey)
        self._entries[nkey] = value
        if meta:
            self._meta[nkey] = meta
        return value

    def add_lazy(self, key: str, import_path: str, **meta: Any) -> None:
        """Register a lazy import; the class is imported on first access.

        Parameters
        ----------
        key : str
            Registry key.
        import_path : str
            Fully-qualified ``"package.module.ClassName"`` string.
        """
        nkey = self._normalize(key)
        self._entries[nkey] = _LazyEntry(import_path)
        if meta:
            self._meta[nkey] = meta

    def alias(self, alias_key: str, canonical_key: str) -> None:
        """Create *alias_key* as an alias for *canonical_key*."""
        self._aliases[self._normalize(alias_key)] = self._normalize(canonical_key)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> T:
        """Return the registered value for *key*; raise ``KeyError`` on miss."""
        nkey = self._resolve_alias(self._normalize(key))
        entry = self._entries.get(nkey)
        if entry is None:
            available = sorted(self._entries.keys())
            raise KeyError(
                f"{self._name}: unknown key {key!r}. "
                f"Available: {available}"
            )
        return self._unwrap(nkey, entry)

    def __contains__(self, key: str) -> bool:  # noqa: D105
        nkey = self._resolve_alias(self._normalize(key))
        return nkey in self._entries

    def meta(self, key: str) -> Dict[str, Any]:
        """Return the metadata dict for *key* (empty dict if none)."""
        nkey = self._resolve_alias(self._normalize(key))
        return self._meta.get(nkey, {})

    def keys(self) -> List[str]:
        """Return sorted list of canonical (non-alias) keys."""
        return sorted(self._entries.keys())

    def __len__(self) -> int:  # noqa: D105
        return len(self._entries)

    def __repr__(self) -> str:  # noqa: D105
        return f"<Registry {self._name!r} ({len(self)} entries)>"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_alias(self, nkey: str) -> str:
        """Follow one level of aliasing."""
        return self._aliases.get(nkey, nkey)

    def _unwrap(self, nkey: str, entry: Any) -> T:
        """Resolve a ``_LazyEntry`` on first access."""
        if isinstance(entry, _LazyEntry):
            resolved = entry.resolve()
            logger.debug("Resolved lazy %s entry %r -> %r", self._name, nkey, resolved)
            self._entries[nkey] = resolved  # cache
            self._validate_protocol(resolved, nkey)
            return resolved  # type: ignore[return-value]
        return entry  # type: ignore[return-value]

    def _validate_protocol(self, value: Any, nkey: str) -> None:
        """Advisory protocol check. Warns, never blocks."""
        if self._protocol is None or not isinstance(value, type):
            return
        attrs = {
            attr for attr in vars(self._protocol)
            if not attr.startswith("_") and callable(getattr(self._protocol, attr, None))
        }
        missing = [a for a in sorted(attrs) if not hasattr(value, a)]
        if missing:
            warnings.warn(
                f"{self._name}: {value!r} registered under "
                f"{nkey!r} may not satisfy {self._protocol.__name__}; "
                f"missing: {missing}",
                stacklevel=3,
            )
