"""
Solve-for-unknown formula definitions and evaluator.

Each formula is a closed-form relation among a few named variables,
with one rearrangement per variable so any of them can be the unknown.
Rearrangements live in a lookup table keyed by (formula id, unknown);
the evaluator never branches on formula names.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from calcengine.errors import DomainError, UnknownFormulaError
from calcengine.guard import check_divisors

logger = logging.getLogger(__name__)

# Ideal gas constant, J/(mol·K) == Pa·m³/(mol·K)
GAS_CONSTANT = 8.314


@dataclass(frozen=True)
class Variable:
    """A named quantity in a formula."""
    name: str          # e.g. 'voltage'
    label: str         # e.g. 'Voltage (V)'
    unit: str          # unit label attached to solved values
    description: str = ''


@dataclass(frozen=True)
class Rearrangement:
    """One algebraic rearrangement of a formula, solving for a single variable."""
    solve: Callable[[Dict[str, float]], float]
    requires: Tuple[str, ...]
    nonzero: Tuple[str, ...] = ()
    # Expression that must be >= 0 before a square root is taken
    radicand: Optional[Callable[[Dict[str, float]], float]] = None


@dataclass(frozen=True)
class FormulaSpec:
    """Complete definition of a closed-form relation."""
    name: str
    relation: str
    description: str
    variables: List[Variable]
    rearrangements: Dict[str, Rearrangement]
    category: str = 'physics'

    def variable(self, name: str) -> Variable:
        for var in self.variables:
            if var.name == name:
                return var
        raise DomainError(f"'{name}' is not a variable of {self.name}.", name)


@dataclass(frozen=True)
class FormulaResult:
    """Value of the solved variable plus its unit label."""
    value: float
    unit: str
    formula: str
    unknown: str
    inputs: Dict[str, float] = field(default_factory=dict)


def _kinetic_velocity(v: Dict[str, float]) -> float:
    """v = √(2·KE/m)"""
    return math.sqrt(2 * v['energy'] / v['mass'])


# Registry of all formulas
FORMULAS: Dict[str, FormulaSpec] = {
    'ohms_law': FormulaSpec(
        name='ohms_law',
        relation='V = I·R',
        description="Ohm's law relating voltage, current and resistance",
        variables=[
            Variable('voltage', 'Voltage (V)', 'Volts (V)'),
            Variable('current', 'Current (I)', 'Amperes (A)'),
            Variable('resistance', 'Resistance (R)', 'Ohms (Ω)'),
        ],
        rearrangements={
            'voltage': Rearrangement(
                solve=lambda v: v['current'] * v['resistance'],
                requires=('current', 'resistance'),
            ),
            'current': Rearrangement(
                solve=lambda v: v['voltage'] / v['resistance'],
                requires=('voltage', 'resistance'),
                nonzero=('resistance',),
            ),
            'resistance': Rearrangement(
                solve=lambda v: v['voltage'] / v['current'],
                requires=('voltage', 'current'),
                nonzero=('current',),
            ),
        },
        category='electrical',
    ),
    'newtons_second_law': FormulaSpec(
        name='newtons_second_law',
        relation='F = m·a',
        description="Newton's second law of motion",
        variables=[
            Variable('force', 'Force (F)', 'Newtons (N)', 'The push or pull on an object.'),
            Variable('mass', 'Mass (m)', 'Kilograms (kg)', 'The amount of matter in an object.'),
            Variable('acceleration', 'Acceleration (a)', 'm/s²', 'The rate of change of velocity.'),
        ],
        rearrangements={
            'force': Rearrangement(
                solve=lambda v: v['mass'] * v['acceleration'],
                requires=('mass', 'acceleration'),
            ),
            'mass': Rearrangement(
                solve=lambda v: v['force'] / v['acceleration'],
                requires=('force', 'acceleration'),
                nonzero=('acceleration',),
            ),
            'acceleration': Rearrangement(
                solve=lambda v: v['force'] / v['mass'],
                requires=('force', 'mass'),
                nonzero=('mass',),
            ),
        },
    ),
    'density': FormulaSpec(
        name='density',
        relation='ρ = m/V',
        description='Mass per unit volume',
        variables=[
            Variable('density', 'Density (ρ)', 'kg/m³', 'The mass of a substance per unit volume.'),
            Variable('mass', 'Mass (m)', 'kg', 'The amount of matter in the object.'),
            Variable('volume', 'Volume (V)', 'm³', 'The amount of space the object occupies.'),
        ],
        rearrangements={
            'density': Rearrangement(
                solve=lambda v: v['mass'] / v['volume'],
                requires=('mass', 'volume'),
                nonzero=('volume',),
            ),
            'mass': Rearrangement(
                solve=lambda v: v['density'] * v['volume'],
                requires=('density', 'volume'),
            ),
            'volume': Rearrangement(
                solve=lambda v: v['mass'] / v['density'],
                requires=('density', 'mass'),
                nonzero=('density',),
            ),
        },
    ),
    'torque': FormulaSpec(
        name='torque',
        relation='τ = F·r',
        description='Rotational force about a pivot',
        variables=[
            Variable('torque', 'Torque (τ)', 'Newton-meters (Nm)'),
            Variable('force', 'Force (F)', 'Newtons (N)'),
            Variable('radius', 'Radius (Lever Arm)', 'meters (m)'),
        ],
        rearrangements={
            'torque': Rearrangement(
                solve=lambda v: v['force'] * v['radius'],
                requires=('force', 'radius'),
            ),
            'force': Rearrangement(
                solve=lambda v: v['torque'] / v['radius'],
                requires=('torque', 'radius'),
                nonzero=('radius',),
            ),
            'radius': Rearrangement(
                solve=lambda v: v['torque'] / v['force'],
                requires=('torque', 'force'),
                nonzero=('force',),
            ),
        },
    ),
    'speed_distance_time': FormulaSpec(
        name='speed_distance_time',
        relation='d = s·t',
        description='Distance covered at constant speed',
        variables=[
            Variable('speed', 'Speed', 'km/h'),
            Variable('distance', 'Distance', 'km'),
            Variable('time', 'Time', 'hours'),
        ],
        rearrangements={
            'distance': Rearrangement(
                solve=lambda v: v['speed'] * v['time'],
                requires=('speed', 'time'),
            ),
            'speed': Rearrangement(
                solve=lambda v: v['distance'] / v['time'],
                requires=('distance', 'time'),
                nonzero=('time',),
            ),
            'time': Rearrangement(
                solve=lambda v: v['distance'] / v['speed'],
                requires=('distance', 'speed'),
                nonzero=('speed',),
            ),
        },
        category='motion',
    ),
    'kinetic_energy': FormulaSpec(
        name='kinetic_energy',
        relation='KE = ½·m·v²',
        description='Energy of a moving body',
        variables=[
            Variable('energy', 'Kinetic Energy (KE)', 'Joules (J)'),
            Variable('mass', 'Mass (m)', 'Kilograms (kg)'),
            Variable('velocity', 'Velocity (v)', 'm/s'),
        ],
        rearrangements={
            'energy': Rearrangement(
                solve=lambda v: 0.5 * v['mass'] * v['velocity'] * v['velocity'],
                requires=('mass', 'velocity'),
            ),
            'mass': Rearrangement(
                solve=lambda v: 2 * v['energy'] / (v['velocity'] * v['velocity']),
                requires=('energy', 'velocity'),
                nonzero=('velocity',),
            ),
            'velocity': Rearrangement(
                solve=_kinetic_velocity,
                requires=('energy', 'mass'),
                nonzero=('mass',),
                radicand=lambda v: 2 * v['energy'] / v['mass'],
            ),
        },
        category='motion',
    ),
    'ideal_gas_law': FormulaSpec(
        name='ideal_gas_law',
        relation='P·V = n·R·T',
        description=f'Ideal gas equation of state (R = {GAS_CONSTANT} J/(mol·K))',
        variables=[
            Variable('pressure', 'Pressure (P)', 'Pascals (Pa)'),
            Variable('volume', 'Volume (V)', 'Cubic Meters (m³)'),
            Variable('moles', 'Amount (n)', 'Moles (mol)'),
            Variable('temperature', 'Temperature (T)', 'Kelvin (K)'),
        ],
        rearrangements={
            'pressure': Rearrangement(
                solve=lambda v: v['moles'] * GAS_CONSTANT * v['temperature'] / v['volume'],
                requires=('volume', 'moles', 'temperature'),
                nonzero=('volume',),
            ),
            'volume': Rearrangement(
                solve=lambda v: v['moles'] * GAS_CONSTANT * v['temperature'] / v['pressure'],
                requires=('pressure', 'moles', 'temperature'),
                nonzero=('pressure',),
            ),
            'moles': Rearrangement(
                solve=lambda v: v['pressure'] * v['volume'] / (GAS_CONSTANT * v['temperature']),
                requires=('pressure', 'volume', 'temperature'),
                nonzero=('temperature',),
            ),
            'temperature': Rearrangement(
                solve=lambda v: v['pressure'] * v['volume'] / (GAS_CONSTANT * v['moles']),
                requires=('pressure', 'volume', 'moles'),
                nonzero=('moles',),
            ),
        },
        category='chemistry',
    ),
    'acceleration': FormulaSpec(
        name='acceleration',
        relation='a = (v − u)/t',
        description='Uniform acceleration from initial to final velocity',
        variables=[
            Variable('acceleration', 'Acceleration (a)', 'm/s²'),
            Variable('final_velocity', 'Final Velocity (v)', 'm/s'),
            Variable('initial_velocity', 'Initial Velocity (u)', 'm/s'),
            Variable('time', 'Time (t)', 's'),
        ],
        rearrangements={
            'acceleration': Rearrangement(
                solve=lambda v: (v['final_velocity'] - v['initial_velocity']) / v['time'],
                requires=('final_velocity', 'initial_velocity', 'time'),
                nonzero=('time',),
            ),
            'final_velocity': Rearrangement(
                solve=lambda v: v['initial_velocity'] + v['acceleration'] * v['time'],
                requires=('initial_velocity', 'acceleration', 'time'),
            ),
            'initial_velocity': Rearrangement(
                solve=lambda v: v['final_velocity'] - v['acceleration'] * v['time'],
                requires=('final_velocity', 'acceleration', 'time'),
            ),
            'time': Rearrangement(
                solve=lambda v: (v['final_velocity'] - v['initial_velocity']) / v['acceleration'],
                requires=('final_velocity', 'initial_velocity', 'acceleration'),
                nonzero=('acceleration',),
            ),
        },
        category='motion',
    ),
}


def get_formula(name: str) -> FormulaSpec:
    """Get a formula definition by id."""
    if name not in FORMULAS:
        raise UnknownFormulaError(f"Unknown formula '{name}'. Available: {list(FORMULAS.keys())}", name)
    return FORMULAS[name]


def list_formulas(category: Optional[str] = None) -> List[Dict]:
    """List all available formulas, optionally filtered by category."""
    result = []
    for name, spec in FORMULAS.items():
        if category and spec.category != category:
            continue
        result.append({
            'name': spec.name,
            'relation': spec.relation,
            'description': spec.description,
            'category': spec.category,
            'variables': [
                {'name': v.name, 'label': v.label, 'unit': v.unit, 'description': v.description}
                for v in spec.variables
            ],
        })
    return result


def evaluate_formula(
    formula: Union[str, FormulaSpec],
    unknown: str,
    known: Dict[str, Optional[float]],
) -> FormulaResult:
    """
    Solve a formula for one unknown variable.

    Args:
        formula: Formula id (e.g. 'ohms_law') or a FormulaSpec
        unknown: Variable to solve for (e.g. 'current')
        known: Values of the other variables. Any value supplied for the
               unknown itself is ignored.

    Returns:
        FormulaResult with the unrounded value and the variable's unit label.

    Raises:
        DomainError: from the input guard, or if the result is not finite.
    """
    spec = get_formula(formula) if isinstance(formula, str) else formula
    check_divisors(spec, unknown, known)

    rearrangement = spec.rearrangements[unknown]
    inputs = {name: float(known[name]) for name in rearrangement.requires}
    try:
        value = rearrangement.solve(inputs)
    except (ZeroDivisionError, OverflowError):
        raise DomainError(f"Result for {unknown} is not a finite number.", unknown)

    if not math.isfinite(value):
        raise DomainError(f"Result for {unknown} is not a finite number.", unknown)

    logger.debug("Solved %s for %s = %r from %r", spec.name, unknown, value, inputs)
    return FormulaResult(
        value=value,
        unit=spec.variable(unknown).unit,
        formula=spec.name,
        unknown=unknown,
        inputs=inputs,
    )
