"""Locate the App named on the command line."""

import importlib
from typing import Any

from swoop.app import App


def resolve_app(target: str) -> App:
    """Import ``"package.module:attr"`` and return the App it names.

    ``attr`` defaults to ``app`` and may be dotted (``"svc:api.app"``).
    A zero-argument callable that is not an App is called once and must
    return one, so ``"svc:create_app"`` works for factories.

    Raises ``ModuleNotFoundError`` / ``AttributeError`` when the target
    does not exist and ``TypeError`` when it is not an App.
    """
    module_name, _, attr_path = target.partition(":")
    if not module_name:
        msg = f"{target!r} does not name a module"
        raise TypeError(msg)

    obj: Any = importlib.import_module(module_name)
    for attr in (attr_path or "app").split("."):
        obj = getattr(obj, attr)

    if not isinstance(obj, App) and callable(obj):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"App factory {target!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{target!r} is a {type(obj).__name__}, not a swoop.App"
        raise TypeError(msg)
    return obj
