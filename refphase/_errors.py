from typing import Optional


class PhaseError(Exception):
    """Base class of the errors raised by `refphase`

    Parameters
    ----------
    msg : str
        description of the error
    indiv : int, optional
        index of the sample being processed
    window : int, optional
        index of the window being processed
    """

    def __init__(
        self, msg: str, indiv: Optional[int] = None, window: Optional[int] = None
    ):
        self.msg = msg
        self.indiv = indiv
        self.window = window
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.indiv is not None:
            context.append(f"indiv={self.indiv}")
        if self.window is not None:
            context.append(f"window={self.window}")
        if len(context) == 0:
            return self.msg
        return f"{self.msg} ({', '.join(context)})"

    def with_context(
        self, indiv: Optional[int] = None, window: Optional[int] = None
    ) -> "PhaseError":
        """Return a copy of the error with the missing context filled in"""
        return type(self)(
            self.msg,
            indiv=self.indiv if self.indiv is not None else indiv,
            window=self.window if self.window is not None else window,
        )


class ConfigError(PhaseError):
    """Invalid window configuration, thread count or tie-break policy"""


class AlignmentError(PhaseError):
    """Typed markers cannot be mapped onto the reference markers"""


class PanelError(PhaseError):
    """Reference panel cannot support diploid phasing in some window"""


class DegenerateWindowError(PhaseError):
    """Every genotype of a sample is missing in a window"""
