"""
calcdesk calculation engine

Pure, stateless evaluators behind the calculator pages: solve-for-unknown
formulas, IPv4 subnet arithmetic, loan amortization and a few small
algebra/combinatorics helpers.

Every function is a deterministic function of its inputs. Failures are
raised as CalculationError subclasses, never returned as NaN/Infinity.
"""

from calcengine.errors import (
    CalculationError,
    DomainError,
    FormatError,
    NonConvergentPayoffError,
    UnknownFormulaError,
)
from calcengine.formulas import FormulaSpec, evaluate_formula, get_formula, list_formulas
from calcengine.subnet import compute_subnet, format_address, parse_address, parse_cidr
from calcengine.amortization import amortization_schedule, quote_monthly_payment, solve_payoff
from calcengine.combinatorics import combinations, permutations
from calcengine.algebra import determinant, solve_quadratic
from calcengine.fertilizer import Fertilizer, allocate_fertilizers

__version__ = "0.1.0"
