from __future__ import annotations


class GasPriceError(Exception):
    """Base class for every failure raised while estimating gas prices."""


class ConfigMissingError(GasPriceError):
    """A required credential or endpoint URL is not configured."""


class TransportError(GasPriceError):
    """The HTTP call to a price source failed."""


class ProtocolError(GasPriceError):
    """A price source answered with an error or an unparsable body."""


class EstimationFailedError(GasPriceError):
    """Both sources failed and the error streak escalated."""


class EstimatorStoppedError(GasPriceError):
    """An on-demand read hit a torn-down estimator that never obtained a price."""
