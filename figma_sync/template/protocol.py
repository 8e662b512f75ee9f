"""Runtime protocols for evaluating template bindings.

These mirror the design tool's instance API that rendered templates call
(`figma.selectedInstance` and the objects returned by `getInstanceSwap`),
so binding semantics can be evaluated in Python. A nested instance is only
known through its capability to run its own template; the renderer never
depends on which generator produced that template.
"""

from collections.abc import Mapping
from typing import Any, Protocol


class NestedInstance(Protocol):
    """A component instance placed in an INSTANCE_SWAP slot."""

    def has_code_connect(self) -> bool:
        """Whether the nested component has its own template."""
        ...

    def execute_template(self) -> Mapping[str, Any] | None:
        """Run the nested template.

        Returns:
            The template result, e.g. `{"metadata": {"props": {"drawable": ...}}}`,
            or None when it produced nothing.
        """
        ...


class SelectedInstance(Protocol):
    """The instance a template is evaluated against."""

    def get_string(self, name: str) -> str | None:
        """Text value of a property, None when unset."""
        ...

    def get_boolean(self, name: str, mapping: Mapping[str, bool]) -> bool | None:
        """Boolean value of a variant axis, mapped through `mapping`."""
        ...

    def get_enum(self, name: str, mapping: Mapping[str, str]) -> str | None:
        """Variant option of a property, mapped through `mapping`."""
        ...

    def get_instance_swap(self, name: str) -> NestedInstance | None:
        """Instance placed in a swap slot, None when empty."""
        ...


__all__ = ["NestedInstance", "SelectedInstance"]
