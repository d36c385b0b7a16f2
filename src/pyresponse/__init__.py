"""
Pyresponse - Complex frequency response of digital filters.
"""

from .array_ops import reverse
from .complex_poly import ComplexPolynomial
from .errors import PyResponseError, InvalidArgumentError, IndexOutOfRangeError
from .filter_coeffs import FilterCoefficients
from .transfer_function import TransferFunction, compute_transfer_function
from .verification import verify_response, summarize_response

__version__ = "0.1.0"
__all__ = [
    "reverse",
    "ComplexPolynomial",
    "PyResponseError",
    "InvalidArgumentError",
    "IndexOutOfRangeError",
    "FilterCoefficients",
    "TransferFunction",
    "compute_transfer_function",
    "verify_response",
    "summarize_response",
]
