"""
Error classes for patrimoine.

This module defines the exception taxonomy used throughout the simulator:
configuration problems detected while loading or initializing models,
grid lookups falling outside a tax table, domain range violations, invalid
ownership structures, liquidity shortfalls and out-of-sequence operations.
"""

from __future__ import annotations


class PatrimoineError(Exception):
    """Root of every exception raised by the patrimoine package."""


class ConfigError(PatrimoineError):
    """
    Configuration error during model loading or scenario setup.

    This exception is raised when a fiscal, economic or user data document
    cannot be turned into a usable model: missing required fields, values of
    the wrong type, grids that are not strictly ascending, probability tables
    that do not sum to one, unknown variant tags.

    **Common Causes:**
    - Missing ``grid`` or ``version`` sections in a fiscal model document
    - Tax grid floors that are negative or not strictly increasing
    - Discrete distributions whose probabilities do not sum to 100%
    - Unknown ``type`` discriminator in a tagged variant (time span,
      investment type, interest rate type, work income)
    - Using a grid-based model before calling ``initialize()``

    **Example Usage:**
        ```python
        from patrimoine.core.errors import ConfigError
        from patrimoine.core.config_loader import load_fiscal_model

        try:
            fiscal = load_fiscal_model("fiscal.yaml")
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```

    **When to Use:**
    - In model ``initialize()`` methods for parameter validation
    - While normalizing configuration documents
    - When a scenario references unknown family members
    """


class ConfigLoadError(ConfigError, ValueError):
    """Raised when a configuration document cannot be parsed or validated."""


class RateGridError(PatrimoineError):
    """Base class for tax grid (barème) problems."""


class NotInRightSliceError(RateGridError):
    """
    Raised when a taxable value falls outside every slice of a grid.

    This is deliberately distinct from a legitimately zero tax: a grid that is
    expected to cover its whole domain must never silently return 0 for an
    input it does not cover.
    """


class SlicesNotAscendingError(RateGridError, ConfigError):
    """Raised when grid floors are not strictly increasing."""


class NegativeFloorError(RateGridError, ConfigError):
    """Raised when a grid slice has a negative floor."""


class ModelError(PatrimoineError):
    """Raised when a fiscal, economic or sociological model cannot compute."""


class OutOfBoundsError(ModelError, ValueError):
    """
    Raised for inputs outside a function's domain.

    Typical cases are a negative age in the demembrement table, a last year
    before the first year when sampling economic rates, a negative number of
    periods in a future value computation or negative household counts in
    the family quotient.
    """


class GridSliceIssueError(ModelError):
    """Raised when a model grid does not cover a looked-up value."""


class OwnershipError(PatrimoineError):
    """
    Raised for invalid ownership structures or unsupported transfers.

    Examples: computing a dismembered value for an asset that is not
    dismembered, an ownership whose fractions do not sum to 100% after a
    transfer, a life insurance held in full ownership by several persons
    when one of them dies.
    """


class CashFlowError(PatrimoineError):
    """
    Raised when the yearly cash shortfall cannot be covered.

    The withdrawal step raises this error when every liquid free investment
    has been exhausted before the year's deficit is covered. It terminates
    the current run only: the social accounts builder records it and a
    Monte-Carlo batch carries on with the next run.

    Attributes:
        missing_cash: Amount that could not be withdrawn (euros, positive)
    """

    def __init__(self, message: str, missing_cash: float = 0.0):
        self.missing_cash = missing_cash
        super().__init__(message)

    @classmethod
    def not_enough_cash(cls, missing_cash: float) -> CashFlowError:
        """Build the error for a shortfall of ``missing_cash`` euros."""
        return cls(
            f"Not enough cash in free investments: {missing_cash:,.0f} € missing",
            missing_cash=missing_cash,
        )


class IllegalOperationError(PatrimoineError):
    """
    Raised when an operation is called out of sequence.

    For instance capitalizing a free investment for any year other than the
    year following its current state. This signals a programming error in the
    caller and must never be swallowed.
    """
