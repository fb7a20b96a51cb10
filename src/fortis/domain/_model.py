"""
Domain-level model contract.

The model owns every trainable parameter and hands out references by a
stable integer id. Graph builders resolve parameters through the model and
wrap them in `ParameterNode`s; trainers iterate over them to apply updates.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Tuple, runtime_checkable

from ._parameter import IParameter


@runtime_checkable
class IModel(Protocol):
    """
    Parameter store interface.

    Required methods
    ----------------
    - `add_parameter(shape, initializer=..., name=...)` allocates and
      initializes a parameter, returning its id.
    - `get_parameter(id)` returns the parameter registered under `id`.
    - `parameters()` iterates over every parameter in id order.
    """

    def add_parameter(
        self,
        shape: Tuple[int, int],
        *,
        initializer: str = "normal",
        name: str = "",
    ) -> int: ...

    def get_parameter(self, parameter_id: int) -> IParameter: ...

    def parameters(self) -> Iterable[IParameter]: ...
