"""Ordered merge of site configurations."""

from typing import Any, Dict, List, Mapping, Sequence

from .exceptions import MalformedDeclarationError
from .models.theme import PLUGINS_KEY


def normalize_plugin_entry(entry: Any) -> Any:
    """Expand a plugin entry to ``{"resolve", "options"}`` form.

    Strings become records with empty options; records without options get
    an empty mapping. Anything else is returned unchanged.

    Raises:
        MalformedDeclarationError: If a record's options are not a mapping
    """
    if isinstance(entry, str):
        return {"resolve": entry, "options": {}}
    if isinstance(entry, Mapping):
        options = entry.get("options")
        if options is not None and not isinstance(options, Mapping):
            raise MalformedDeclarationError(
                f"Options of plugin '{entry.get('resolve')}' must be a mapping, got {type(options).__name__}",
                list_key=PLUGINS_KEY,
                declaration=entry,
            )
        normalized = dict(entry)
        normalized["options"] = dict(options or {})
        return normalized
    return entry


def _plugin_identity(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        return (entry.get("resolve"), entry.get("options"))
    return entry


def plugin_list(config: Mapping[str, Any]) -> Sequence[Any]:
    """Return the plugin list of a config, empty when absent."""
    plugins = config.get(PLUGINS_KEY)
    if not plugins:
        return []
    if not isinstance(plugins, (list, tuple)):
        raise MalformedDeclarationError(
            f"'{PLUGINS_KEY}' must be a list, got {type(plugins).__name__}",
            list_key=PLUGINS_KEY,
            declaration=plugins,
        )
    return plugins


def merge_plugin_lists(base: Sequence[Any], overlay: Sequence[Any]) -> List[Any]:
    """Concatenate two plugin lists, base first.

    Entries are normalized and an entry equal in ``resolve`` and ``options``
    to an earlier one is dropped.
    """
    merged: List[Any] = []
    for entry in [*base, *overlay]:
        entry = normalize_plugin_entry(entry)
        identity = _plugin_identity(entry)
        if any(_plugin_identity(seen) == identity for seen in merged):
            continue
        merged.append(entry)
    return merged


def merge_configs(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``overlay`` on top of ``base`` without mutating either.

    The plugin list is concatenated; every other key present in
    ``overlay`` replaces the value from ``base``.

    Args:
        base: Earlier configuration
        overlay: Later configuration, taking precedence

    Returns:
        New merged configuration

    Raises:
        MalformedDeclarationError: If a plugin list or entry is malformed
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if key == PLUGINS_KEY:
            continue
        merged[key] = value

    if PLUGINS_KEY in base or PLUGINS_KEY in overlay:
        merged[PLUGINS_KEY] = merge_plugin_lists(plugin_list(base), plugin_list(overlay))
    return merged
