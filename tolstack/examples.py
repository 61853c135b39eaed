"""Built-in example tolerance stacks for demonstration."""

from tolstack.models import DimTol, FloatTL, LinearTL, Parameters, State


def create_bracket_example() -> State:
    """Mounting bracket located by two floating screws.

    Dimension loop:
        +Bracket span
        +Screw float (hole 2.60 +0.10/-0, screw 2.45 +0.02/-0.05), twice
    """
    state = State(
        parameters=Parameters(assy_sigma=4.0, n_iterations=1_000_000),
        name="Bracket with floating screws",
    )

    state.add(LinearTL(
        DimTol(65.88, 0.17, 0.17, 3.0),
        description="Bracket span",
    ))
    state.add(FloatTL(
        hole=DimTol(2.60, 0.10, 0.0, 3.0),
        pin=DimTol(2.45, 0.02, 0.05, 3.0),
        sigma=3.0,
        description="Left screw float",
    ))
    state.add(FloatTL(
        hole=DimTol(2.60, 0.10, 0.0, 3.0),
        pin=DimTol(2.45, 0.02, 0.05, 3.0),
        sigma=3.0,
        description="Right screw float",
    ))

    return state


def create_housing_example() -> State:
    """Mixed chain of housing walls, spacers and a dowel float.

    Negative nominals are dimensions that subtract from the gap.
    """
    state = State(
        parameters=Parameters(assy_sigma=4.0, n_iterations=1_000_000),
        name="Housing gap",
    )

    state.add(LinearTL(DimTol(5.58, 0.03, 0.03, 3.0), description="Cover lip"))
    state.add(LinearTL(DimTol(-25.78, 0.07, 0.07, 3.0), description="Housing depth"))
    state.add(FloatTL(
        hole=DimTol(2.18, 0.03, 0.03, 3.0),
        pin=DimTol(2.13, 0.05, 0.05, 3.0),
        sigma=3.0,
        description="Dowel float",
    ))
    state.add(LinearTL(DimTol(14.58, 0.05, 0.05, 3.0), description="Spacer"))
    state.add(LinearTL(DimTol(2.5, 0.3, 0.3, 3.0), description="Gasket"))
    state.add(LinearTL(DimTol(3.85, 0.25, 0.25, 3.0), description="Board stack"))
    state.add(LinearTL(DimTol(-0.3, 0.15, 0.15, 3.0), description="Label"))

    return state


EXAMPLES = {
    "bracket": create_bracket_example,
    "housing": create_housing_example,
}
