"""Attribute-style front-end over PACController.get / PACController.set."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .controller import PACController


class VariableNamespace:
    """
    Maps attribute access to variable access: ``ns.iCount`` reads iCount,
    ``ns.fSetpoint = 2.5`` writes fSetpoint. Names starting with an underscore
    are ordinary attributes.
    """

    __slots__ = ("_controller",)

    def __init__(self, controller: "PACController") -> None:
        object.__setattr__(self, "_controller", controller)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._controller.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"Cannot set private attribute {name!r}")
        self._controller.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self._controller.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._controller.set(name, value)

    def __repr__(self) -> str:
        return f"VariableNamespace({self._controller.host!r})"
