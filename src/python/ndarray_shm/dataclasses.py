# ndarray_shm/dataclasses.py
"""
Dataclasses for structured data within the ndarray_shm library.
"""
from dataclasses import dataclass
from typing import Any, Tuple

from .types import DType, Order
from .exceptions import InvalidArgumentError

@dataclass(frozen=True, slots=True)
class ArrayDescriptor:
    """
    Everything another process needs to re-attach a view: the element type,
    the extents (listed in `order`), and the name of the backing segment.
    """
    dtype: DType
    shape: Tuple[int, ...]
    order: Order
    shm_name: str
    rsize: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "dtype": self.dtype.label,
            "shape": list(self.shape),
            "order": self.order.numpy_order,
            "shm_name": self.shm_name,
            "rsize": self.rsize,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArrayDescriptor":
        """
        Rebuilds a descriptor from `to_dict()` output.

        Raises:
            InvalidArgumentError: If a field is missing or malformed.
        """
        try:
            shape = data["shape"]
            shm_name = data["shm_name"]
            rsize = data["rsize"]
            dtype = DType.from_label(data["dtype"])
            order = Order.from_label(data.get("order", "C"))
        except (KeyError, TypeError) as e:
            raise InvalidArgumentError(f"Malformed array descriptor: {e!r}") from e
        if not isinstance(shape, (list, tuple)) or not all(
            isinstance(e, int) and not isinstance(e, bool) and e >= 0 for e in shape
        ):
            raise InvalidArgumentError(f"Malformed shape in array descriptor: {shape!r}")
        if not isinstance(shm_name, str) or not shm_name:
            raise InvalidArgumentError(f"Malformed segment name in array descriptor: {shm_name!r}")
        if not isinstance(rsize, int) or isinstance(rsize, bool) or rsize < 0:
            raise InvalidArgumentError(f"Malformed rsize in array descriptor: {rsize!r}")
        return cls(
            dtype=dtype,
            shape=tuple(shape),
            order=order,
            shm_name=shm_name,
            rsize=rsize,
        )
