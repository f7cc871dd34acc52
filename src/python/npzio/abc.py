# npzio/abc.py
"""Abstract Base Classes for the npzio library."""

import abc


class NpzFileBase(abc.ABC):
    """Abstract base class for `.npz` archive handles."""

    @abc.abstractmethod
    def close(self) -> None:
        """
        Closes the archive, finishing any pending writes.
        Subsequent operations on the object will raise an error.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def closed(self) -> bool:
        """Returns True if the archive handle is closed."""
        raise NotImplementedError

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("Operation attempted on a closed archive.")

    def __enter__(self) -> "NpzFileBase":
        if self.closed:
            raise ValueError("Cannot enter context with a closed archive handle.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
